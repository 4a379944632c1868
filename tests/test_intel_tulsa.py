from mcedecode.event import MCI_STATUS_MISCV, MceEvent
from mcedecode.intel_tulsa import tulsa_decode_model

INTERNAL = 1 << 10


def _decode(status, misc=0):
    event = MceEvent(status=status, misc=misc)
    tulsa_decode_model(event)
    return event


def test_corrected_event_count():
    event = _decode(5 << 32)
    assert event.error_msg == "Corrected events: 5\n"


def test_ecc_syndrome_only_with_bit_52():
    with_flag = _decode((1 << 52) | (0xAB << 44))
    assert "ECC syndrome: ab\n" in with_flag.error_msg
    without_flag = _decode(0xAB << 44)
    assert "ECC syndrome" not in without_flag.error_msg


def test_misc_dump():
    event = _decode(MCI_STATUS_MISCV | (2 << 40), misc=0x1234)
    assert event.mcistatus_msg == "MISC format 2 value 1234\n"
    assert event.error_msg == ""


def test_no_misc_dump_without_miscv():
    event = _decode(2 << 40, misc=0x1234)
    assert event.mcistatus_msg == ""


def test_bus_error():
    event = _decode(0xE0F | (1 << 16))
    assert event.error_msg == "Parity error detected during FSB request phase"


def test_bus_fields_ignored_for_other_codes():
    event = _decode(0xE0E | (1 << 16))
    assert event.error_msg == ""


def test_front_error():
    event = _decode(INTERNAL | (0x5 << 16))
    assert event.error_msg == "Inclusion error from FSB"


def test_unnamed_front_error_is_shown_raw():
    event = _decode(INTERNAL | (0xC << 16))
    assert event.error_msg == "<0:c>"


def test_internal_error():
    event = _decode(INTERNAL | (0x200 << 16))
    assert event.error_msg == "Internal timeout error"


def test_correctable_ecc():
    event = _decode(INTERNAL | (0xC002 << 16))
    assert event.error_msg == "Correctable ECC event on outgoing core 0 data"


def test_uncorrectable_ecc():
    event = _decode(INTERNAL | (0xE001 << 16))
    assert event.error_msg == "Uncorrectable ECC event on outgoing FSB data"