"""Model-specific decoder for Sandy Bridge processors."""

from __future__ import annotations

from .bitfield import decode_bitfield, extract, field, test_prefix
from .event import MCI_STATUS_UC, CpuType, McePriv, MceEvent

_PCU_1 = (
    "No error",
    "Non_IMem_Sel",
    "I_Parity_Error",
    "Bad_OpCode",
    "I_Stack_Underflow",
    "I_Stack_Overflow",
    "D_Stack_Underflow",
    "D_Stack_Overflow",
    "Non-DMem_Sel",
    "D_Parity_Error",
)

_PCU_2 = {
    0x00: "No Error",
    0x0D: "MC_IMC_FORCE_SR_S3_TIMEOUT",
    0x0E: "MC_MC_CPD_UNCPD_ST_TIMEOUT",
    0x0F: "MC_PKGS_SAFE_WP_TIMEOUT",
    0x43: "MC_PECI_MAILBOX_QUIESCE_TIMEOUT",
    0x5C: "MC_MORE_THAN_ONE_LT_AGENT",
    0x60: "MC_INVALID_PKGS_REQ_PCH",
    0x61: "MC_INVALID_PKGS_REQ_QPI",
    0x62: "MC_INVALID_PKGS_RES_QPI",
    0x63: "MC_INVALID_PKGC_RES_PCH",
    0x64: "MC_INVALID_PKG_STATE_CONFIG",
    0x70: "MC_WATCHDG_TIMEOUT_PKGC_SLAVE",
    0x71: "MC_WATCHDG_TIMEOUT_PKGC_MASTER",
    0x72: "MC_WATCHDG_TIMEOUT_PKGS_MASTER",
    0x7A: "MC_HA_FAILSTS_CHANGE_DETECTED",
    0x81: "MC_RECOVERABLE_DIE_THERMAL_TOO_HOT",
}

_PCU_MC4 = (field(16, _PCU_1), field(24, _PCU_2))

_MEMCTRL_1 = {
    0x001: "Address parity error",
    0x002: "HA Wrt buffer Data parity error",
    0x004: "HA Wrt byte enable parity error",
    0x008: "Corrected patrol scrub error",
    0x010: "Uncorrected patrol scrub error",
    0x020: "Corrected spare error",
    0x040: "Uncorrected spare error",
}

_MEMCTRL_MC8 = (field(16, _MEMCTRL_1),)


def snb_decode_model(priv: McePriv, event: MceEvent) -> None:
    """Decode model-specific bits of a Sandy Bridge event."""
    status = event.status
    mca = status & 0xFFFF
    bank = event.bank

    if bank == 4:
        decode_bitfield(event, status, _PCU_MC4)
    elif bank in (6, 7):
        # MCACOD is already decoded; only the unit is named here.
        if priv.cputype is CpuType.SANDY_BRIDGE_EP:
            event.add("bank_name", "QPI")
    elif 8 <= bank <= 11:
        decode_bitfield(event, status, _MEMCTRL_MC8)

    if (mca >> 7) != 1:
        return
    if bank < 8 or bank > 11 or status & MCI_STATUS_UC or not test_prefix(7, status & 0xEFFF):
        return

    chan = extract(status, 0, 3)
    if chan == 0xF:
        return
    event.add("mc_location", f"memory_channel={chan}")

    # A rank whose valid bit is clear is reported as -1.
    rank0 = extract(event.misc, 46, 50) if extract(event.misc, 62, 62) else -1
    rank1 = extract(event.misc, 51, 55) if extract(event.misc, 63, 63) else -1
    event.add("mc_location", f"ranks={rank0} and {rank1}")