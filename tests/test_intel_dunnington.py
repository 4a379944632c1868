import pytest

from mcedecode.event import MceEvent
from mcedecode.intel_dunnington import dunnington_decode_model


def _decode(status):
    event = MceEvent(status=status)
    dunnington_decode_model(event)
    return event.error_msg


def test_bus_parity_error():
    assert _decode(0xE0F | (1 << 16)) == "Parity error detected during FSB request phase"


def test_bus_hard_failure():
    assert "Hard Failure response received for a local transaction" in _decode(0xE0F | (1 << 20))


def test_front_error():
    assert _decode(0x400 | (0x1 << 16)) == "Inclusion error from core 0"


def test_front_error_core2():
    assert _decode(0x400 | (0xA << 16)) == "Inclusion error from core 2"


def test_internal_error_table():
    assert _decode(0x400 | (0x0500 << 16)) == "Quiet cycle timeout error (correctable)"


@pytest.mark.parametrize(
    "mca,text",
    [
        (0xC002, "Correctable ECC event on outgoing core 0 data"),
        (0xC008, "Correctable ECC event on outgoing core 2 data"),
        (0xE004, "Uncorrectable ECC event on outgoing core 1 data"),
    ],
)
def test_ecc_events(mca, text):
    assert _decode(0x400 | (mca << 16)) == text


def test_unrelated_code_decodes_nothing():
    assert _decode(0x0001 | (1 << 16)) == ""