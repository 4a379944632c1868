import pytest

from mcedecode.event import MCI_STATUS_UC, CpuType, MceEvent
from mcedecode.intel_i10nm import i10nm_decode_model


def _decode(cputype, bank, status, misc=0):
    event = MceEvent(bank=bank, status=status, misc=misc)
    i10nm_decode_model(cputype, event)
    return event


@pytest.mark.parametrize("cputype", [CpuType.HASWELL_EPEX, CpuType.GENERIC, CpuType.SKYLAKE_XEON])
def test_other_cpus_are_left_alone(cputype):
    event = _decode(cputype, 13, (0x08 << 16) | 0x91)
    assert event.error_msg == ""
    assert event.mc_location == ""


def test_pcu_primary_code():
    event = _decode(CpuType.ICELAKE_XEON, 4, 0x0D << 24)
    assert event.error_msg.startswith("PCU:")
    assert "MCA_LLC_BIST_ACTIVE_TIMEOUT" in event.error_msg


def test_pcu_range_entry():
    event = _decode(CpuType.SAPPHIRERAPIDS, 4, 0x70 << 24)
    assert "MCA_PKGS_RESET_PREP_TIMEOUT" in event.error_msg


def test_pcu_secondary_and_tertiary_codes():
    event = _decode(CpuType.TREMONT_D, 4, (0x4 << 20) | (0x3 << 16))
    assert "Clock/power IP response timeout" in event.error_msg
    assert "Invalid OpCode seen" in event.error_msg
    assert "MCA_" not in event.error_msg


def test_upi_bits_and_code():
    event = _decode(CpuType.ICELAKE_XEON, 5, (1 << 25) | (0x21 << 16))
    assert event.error_msg.startswith("UPI:")
    assert "RF parity error" in event.error_msg
    assert "Phy Inband Reset" in event.error_msg


def test_upi_code_zero_is_named():
    event = _decode(CpuType.ICELAKE_XEON, 8, 0)
    assert "Phy Initialization Failure (NumInit)" in event.error_msg


def test_m2m_bank():
    event = _decode(CpuType.ICELAKE_XEON, 12, (2 << 24) | (1 << 21))
    assert event.error_msg.startswith("M2M:")
    assert "MscodDDRType=0x2" in event.error_msg
    assert "MscodMiscErrs=0x0" in event.error_msg
    assert "M2M time out" in event.error_msg


def test_imc_decode_and_misc():
    event = _decode(CpuType.ICELAKE_XEON, 13, (0x08 << 16) | 0x91)
    assert event.error_msg.startswith("MemCtrl:")
    assert "Corrected patrol scrub error" in event.error_msg
    assert "bank: 0x0 bankgroup: 0x0 row: 0x0 column: 0x0" in event.error_msg
    assert "failed device: 0x0" in event.error_msg
    assert "SDDC memory mode" in event.error_msg
    assert "transient" not in event.error_msg


def test_imc_transient_hides_failed_device():
    misc = (1 << 63) | (5 << 59) | (0x5 << 19)
    event = _decode(CpuType.ICELAKE_XEON, 14, 0x91, misc)
    assert "row: 0x5" in event.error_msg
    assert "ADDDC" in event.error_msg
    assert "transient" in event.error_msg
    assert "failed device" not in event.error_msg


def test_imc_table_selected_by_high_byte():
    event = _decode(CpuType.ICELAKE_XEON, 13, (0x08 << 24) | (0x16 << 16))
    assert "DDR_T_RD_ERROR" in event.error_msg


def test_channel_from_first_controller():
    event = _decode(CpuType.ICELAKE_XEON, 13, 0x92)
    assert event.mc_location == "memory_channel=2"


def test_channel_grows_with_controller():
    first = _decode(CpuType.ICELAKE_XEON, 13, 0x90)
    second = _decode(CpuType.ICELAKE_XEON, 17, 0x90)
    assert first.mc_location == "memory_channel=0"
    assert second.mc_location == "memory_channel=3"


def test_uncorrected_error_has_no_location():
    event = _decode(CpuType.ICELAKE_XEON, 13, MCI_STATUS_UC | 0x91)
    assert event.mc_location == ""


def test_unspecified_channel_has_no_location():
    event = _decode(CpuType.ICELAKE_XEON, 13, 0x9F)
    assert event.mc_location == ""


def test_non_memory_code_has_no_location():
    event = _decode(CpuType.ICELAKE_XEON, 13, 0x0401)
    assert event.mc_location == ""
    assert event.error_msg.startswith("MemCtrl:")


def test_unknown_bank_decodes_nothing():
    event = _decode(CpuType.TREMONT_D, 5, 0x91 | (0x21 << 16))
    assert event.error_msg == ""
    assert event.mc_location == ""


def test_bank_beyond_table_decodes_nothing():
    event = _decode(CpuType.ICELAKE_XEON, 40, 0x91)
    assert event.error_msg == ""
    assert event.mc_location == ""