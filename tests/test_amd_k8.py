from mcedecode.amd_k8 import K8_MCE_THRESHOLD_BASE, parse_amd_k8_event
from mcedecode.event import MCI_THRESHOLD_OVER, MceEvent


def _parse(**kwargs):
    event = MceEvent(**kwargs)
    result = parse_amd_k8_event(event)
    return result, event


def test_gart_error_is_skipped():
    result, event = _parse(bank=4, status=(5 << 16) | (1 << 61))
    assert result is False
    assert event.bank_name == ""
    assert event.error_msg == ""


def test_gart_without_uc_bit_is_decoded():
    result, event = _parse(bank=4, status=5 << 16)
    assert result is True
    assert "GART error" in event.error_msg


def test_data_cache_bank_name():
    result, event = _parse(bank=0, status=0)
    assert result is True
    assert event.bank_name == "data cache (bank=0)"


def test_data_cache_ecc_found_by_scrubber():
    _, event = _parse(bank=0, status=(1 << 45) | (1 << 40))
    assert "Data cache ECC error" in event.error_msg
    assert "found by scrubber" in event.error_msg


def test_northbridge_ecc_clears_ip():
    _, event = _parse(bank=4, status=0, ip=0x1234)
    assert "RAM ECC error" in event.error_msg
    assert "ECC syndrome" in event.error_msg
    assert event.ip == 0


def test_northbridge_link_error_keeps_ip():
    _, event = _parse(bank=4, status=1 << 16, ip=0x1234)
    assert "link number" in event.error_msg
    assert event.ip == 0x1234


def test_bus_unit_array_error():
    _, event = _parse(bank=2, status=0)
    assert "Bus or cache" in event.error_msg
    _, tag = _parse(bank=2, status=1 << 16)
    assert "Cache tag" in tag.error_msg


def test_high_bits_are_named():
    _, event = _parse(bank=3, status=1 << 15)
    assert "corrected ecc error" in event.error_msg


def test_high_bits_ignored_when_bit5_set():
    _, event = _parse(bank=3, status=(1 << 15) | (1 << 5))
    assert "(" not in event.error_msg


def test_threshold_bank():
    _, event = _parse(bank=K8_MCE_THRESHOLD_BASE + 36, misc=MCI_THRESHOLD_OVER)
    assert event.bank_name.startswith("MC4_MISC0 DRAM threshold")
    assert event.error_msg == "Threshold error count overflow"


def test_unknown_threshold_counter_name():
    _, event = _parse(bank=K8_MCE_THRESHOLD_BASE)
    assert event.bank_name.startswith("Unknown threshold counter")
    assert event.error_msg == ""


def test_unknown_bank():
    result, event = _parse(bank=100, status=0)
    assert result is True
    assert event.error_msg == "Don't know how to decode this bank"
    assert event.bank_name == ""