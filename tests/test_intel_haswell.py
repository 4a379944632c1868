from mcedecode.event import MCI_STATUS_UC, MceEvent
from mcedecode.intel_haswell import hsw_decode_model


def _decode(bank, status, misc=0):
    event = MceEvent(bank=bank, status=status, misc=misc)
    hsw_decode_model(event)
    return event


def test_pcu_ubox_messages():
    event = _decode(4, 0x406)
    assert event.mcastatus_msg == "Intel TXT Errors"


def test_pcu_ubox_ignores_bit12():
    event = _decode(4, 0x407 | (1 << 12))
    assert event.mcastatus_msg == "Other UBOX Internal Errors"


def test_pcu_internal_error_only_when_high_bits_clear():
    event = _decode(4, 0x402 | (1 << 16))
    assert "PCU Internal error" in event.error_msg
    other = _decode(4, 0x402 | (1 << 16) | (1 << 18))
    assert "PCU Internal error" not in other.error_msg


def test_pcu_table():
    event = _decode(4, 0x72 << 24)
    assert "MC_WATCHDOG_TIMEOUT_PKGS_MASTER" in event.error_msg


def test_qpi_bank():
    event = _decode(20, 0x11 << 16)
    assert "Rx entered LLR abort state on CRC error" in event.error_msg
    assert event.mcastatus_msg == ""


def test_memctrl_bits():
    event = _decode(12, 1 << 23)
    assert "Corrected memory read error" in event.error_msg


def test_memory_location_two_ranks():
    chan, rank0, rank1 = 3, 1, 2
    misc = (1 << 62) | (1 << 63) | (rank0 << 46) | (rank1 << 51)
    event = _decode(9, 0x90 | chan, misc=misc)
    assert event.mc_location == f"memory_channel={chan} ranks={rank0} and {rank1}"


def test_second_rank_needs_first_valid():
    chan = 1
    event = _decode(10, 0x90 | chan, misc=(1 << 63) | (7 << 51))
    assert event.mc_location == f"memory_channel={chan}"


def test_uncorrected_has_no_location():
    event = _decode(9, MCI_STATUS_UC | 0x90, misc=1 << 62)
    assert event.mc_location == ""


def test_bank_out_of_range_has_no_location():
    event = _decode(17, 0x90, misc=1 << 62)
    assert event.mc_location == ""