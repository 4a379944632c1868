from mcedecode.event import MCI_STATUS_UC, MceEvent
from mcedecode.intel_broadwell_de import broadwell_de_decode_model


def _decode(bank, status, misc=0):
    event = MceEvent(bank=bank, status=status, misc=misc)
    broadwell_de_decode_model(event)
    return event


def test_ubox_error_bit():
    event = _decode(4, 4 << 20)
    assert "Ubox error" in event.mcastatus_msg
    assert "PCU internal error" not in event.mcastatus_msg


def test_pcu_internal_error_uses_low_two_bits():
    assert "PCU internal error" in _decode(4, 1 << 16).mcastatus_msg
    assert "PCU internal error" not in _decode(4, 4 << 16).mcastatus_msg


def test_txt_message_and_pcu_table():
    event = _decode(4, 0x406 | (0x26 << 24))
    assert "Intel TXT errors" in event.mcastatus_msg
    assert "MCA_PKGC_DIRECT_WAKE_RING_TIMEOUT" in event.error_msg


def test_memctrl_banks():
    event = _decode(10, 1 << 24)
    assert event.mcastatus_msg == "MemCtrl: "
    assert "iMC, WDB, parity errors" in event.error_msg


def test_memctrl_prefix_only_for_banks_9_and_10():
    event = _decode(11, 1 << 24)
    assert event.mcastatus_msg == ""


def test_memory_location_single_rank():
    chan, rank = 0, 9
    event = _decode(9, 0x90 | chan, misc=(1 << 62) | (rank << 46))
    assert event.mc_location == f"memory_channel={chan} rank={rank}"


def test_memory_location_without_valid_rank():
    chan = 4
    event = _decode(12, 0x90 | chan)
    assert event.mc_location == f"memory_channel={chan}"


def test_uncorrected_has_no_location():
    event = _decode(9, MCI_STATUS_UC | 0x90, misc=1 << 62)
    assert event.mc_location == ""


def test_unspecified_channel_has_no_location():
    event = _decode(9, 0x9F, misc=1 << 62)
    assert event.mc_location == ""