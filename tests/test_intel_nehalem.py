from mcedecode.event import MCI_STATUS_MISCV, MceEvent
from mcedecode.intel_nehalem import nehalem_decode_model, xeon75xx_decode_model


def test_qpi_status_bit():
    event = MceEvent(status=0x0800 | (1 << 16))
    nehalem_decode_model(event)
    assert "QPI header had bad parity" in event.error_msg
    assert "Clock jitter" not in event.error_msg


def test_qpi_misc_decoded_only_when_valid():
    event = MceEvent(status=0x0800, misc=1 << 24)
    nehalem_decode_model(event)
    assert "IIB" not in event.error_msg

    event = MceEvent(status=0x0800 | MCI_STATUS_MISCV, misc=1 << 24)
    nehalem_decode_model(event)
    assert "QPI Interleave/Head Indication Bit (IIB)" in event.error_msg
    assert "QPI Requestor/Home Node ID (RHNID)" in event.error_msg


def test_memory_controller_location():
    misc = (2 << 18) | (1 << 16)
    event = MceEvent(status=0x0080 | (1 << 16) | MCI_STATUS_MISCV, misc=misc)
    nehalem_decode_model(event)
    assert "Memory read ECC error" in event.error_msg
    assert "Memory corrected error count (CORE_ERR_CNT)" in event.error_msg
    assert event.mc_location == "channel=2, dimm=1"


def test_memory_without_misc_has_no_location():
    event = MceEvent(status=0x0080 | (1 << 17))
    nehalem_decode_model(event)
    assert "Memory ECC error occurred during scrub" in event.error_msg
    assert event.mc_location == ""


def test_internal_error():
    event = MceEvent(status=0x0001 | (0x3 << 24))
    nehalem_decode_model(event)
    assert "Reset firmware did not complete" in event.error_msg


def test_xeon75xx_internal_error():
    event = MceEvent(status=0x0001 | (0x1A << 24))
    xeon75xx_decode_model(event)
    assert "MSID from POC does not match CPU MSID" in event.error_msg


def test_xeon75xx_ignores_other_codes():
    event = MceEvent(status=0x0080 | (1 << 16))
    xeon75xx_decode_model(event)
    assert event.error_msg == ""
    assert event.mc_location == ""