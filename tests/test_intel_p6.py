import pytest

from mcedecode.event import MceEvent
from mcedecode.intel_p6 import core2_decode_model, p4_decode_model, p6old_decode_model


@pytest.mark.parametrize(
    "bit, text",
    [
        (16, "FSB address parity"),
        (19, "PIC and FSB data parity"),
        (23, "Pad address glitch"),
    ],
)
def test_p4_single_bit(bit, text):
    event = MceEvent(status=1 << bit)
    p4_decode_model(event)
    assert event.error_msg == text


def test_p4_ignores_low_bits():
    event = MceEvent(status=0xFFFF)
    p4_decode_model(event)
    assert event.error_msg == ""


def test_p4_keeps_bit_order():
    event = MceEvent(status=(1 << 17) | (1 << 21))
    p4_decode_model(event)
    assert event.error_msg.index("Response hard fail") < event.error_msg.index(
        "Pad state machine"
    )


def test_core2_status_bits():
    event = MceEvent(status=(1 << 31) | (1 << 46))
    core2_decode_model(event)
    assert "BINIT observed" in event.error_msg
    assert "correctable ECC error" in event.error_msg
    assert "FRC error" not in event.error_msg


def test_p6old_status_bits():
    event = MceEvent(status=(1 << 28) | (1 << 30))
    p6old_decode_model(event)
    assert "FRC error" in event.error_msg
    assert "internal BINIT" in event.error_msg
    assert "MCE driven" not in event.error_msg


def test_p6old_ecc_syndrome_reported():
    event = MceEvent(status=0x5A << 47)
    p6old_decode_model(event)
    assert "ECC syndrome" in event.error_msg


def test_core2_bus_queue_error_type():
    event = MceEvent(status=4 << 25)
    core2_decode_model(event)
    assert "BQ_ERR_SINGLE_TYPE" in event.error_msg