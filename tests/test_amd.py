from mcedecode.amd import decode_amd_errcode
from mcedecode.event import (
    MCG_STATUS_RIPV,
    MCI_STATUS_DEFERRED,
    MCI_STATUS_OVER,
    MCI_STATUS_PCC,
    MCI_STATUS_UC,
    MCI_STATUS_VAL,
    MceEvent,
)


def _decode(status, mcgstatus=0):
    event = MceEvent(status=status, mcgstatus=mcgstatus)
    decode_amd_errcode(event)
    return event


def test_corrected_and_invalid():
    event = _decode(0)
    assert event.error_msg == "Corrected error, no action required."
    assert "MCE_INVALID" in event.mcistatus_msg


def test_valid_not_flagged_invalid():
    event = _decode(MCI_STATUS_VAL)
    assert "MCE_INVALID" not in event.mcistatus_msg


def test_uncorrected_ends_as_containable():
    event = _decode(MCI_STATUS_VAL | MCI_STATUS_UC | MCI_STATUS_PCC, MCG_STATUS_RIPV)
    assert event.error_msg == "Uncorrected, software containable error."
    assert "Processor_context_corrupt" in event.mcistatus_msg


def test_deferred():
    event = _decode(MCI_STATUS_VAL | MCI_STATUS_DEFERRED)
    assert event.error_msg == "Deferred error, no action required."


def test_overflow_flag():
    assert "Error_overflow" in _decode(MCI_STATUS_VAL | MCI_STATUS_OVER).mcistatus_msg


def test_ecc_kinds():
    assert "CECC" in _decode(MCI_STATUS_VAL | (2 << 45)).mcistatus_msg
    assert "UECC" in _decode(MCI_STATUS_VAL | (1 << 45)).mcistatus_msg
    assert "ECC" not in _decode(MCI_STATUS_VAL).mcistatus_msg


def test_internal_error_stops_decoding():
    event = _decode(MCI_STATUS_VAL | 0x0600)
    assert event.mcastatus_msg.startswith("Internal")
    assert "hardware assert" in event.mcastatus_msg


def test_tlb_error():
    msg = _decode(MCI_STATUS_VAL | 0x0015).mcastatus_msg
    assert msg.startswith("TLB Error")
    assert "data" in msg and "L1" in msg


def test_memory_error_with_bad_r4():
    msg = _decode(MCI_STATUS_VAL | 0x01A0).mcastatus_msg
    assert msg.startswith("Memory Error")
    assert "Wrong R4!" in msg


def test_bus_error():
    msg = _decode(MCI_STATUS_VAL | 0x0800).mcastatus_msg
    assert msg.startswith("Bus Error")
    assert "local node origin" in msg
    assert "request didn't time out" in msg


def test_unclassified_code_leaves_mcastatus_empty():
    assert _decode(MCI_STATUS_VAL | 0x0001).mcastatus_msg == ""