"""Decoder for AMD K8 family machine-check banks."""

from __future__ import annotations

from .bitfield import bitfield_msg
from .event import MCE_EXTENDED_BANK, MCI_THRESHOLD_OVER, MceEvent

K8_MCE_THRESHOLD_BASE = MCE_EXTENDED_BANK + 1
K8_MCE_THRESHOLD_TOP = K8_MCE_THRESHOLD_BASE + 6 * 9

_K8BANK = (
    "data cache",
    "instruction cache",
    "bus unit",
    "load/store unit",
    "northbridge",
    "fixed-issue reorder",
)

_K8THRESHOLD = {
    4 * 9 + 0: "MC4_MISC0 DRAM threshold",
    4 * 9 + 1: "MC4_MISC1 Link threshold",
    4 * 9 + 2: "MC4_MISC2 L3 Cache threshold",
    4 * 9 + 3: "MC4_MISC3 FBDIMM threshold",
}

_TRANSACTION = ("instruction", "data", "generic", "reserved")
_CACHELEVEL = ("0", "1", "2", "generic")
_MEMTRANS = (
    "generic error", "generic read", "generic write", "data read",
    "data write", "instruction fetch", "prefetch", "evict", "snoop",
    "?", "?", "?", "?", "?", "?", "?",
)
_PARTPROC = (
    "local node origin", "local node response",
    "local node observed", "generic participation",
)
_TIMEOUT = ("request didn't time out", "request timed out")
_MEMORYIO = ("memory", "res.", "i/o", "generic")
_NBEXTENDEDERR = (
    "RAM ECC error",
    "CRC error",
    "Sync error",
    "Master abort",
    "Target abort",
    "GART error",
    "RMW error",
    "Watchdog error",
    "RAM Chipkill ECC error",
    "DEV Error",
    "Link Data Error",
    "Link Protocol Error",
    "NB Array Error",
    "DRAM Parity Error",
    "Link Retry",
    "Tablew Walk Data Error",
    "L3 Cache Data Error",
    "L3 Cache Tag Error",
    "L3 Cache LRU Error",
)

_HIGHBITS_NAMES = {
    31: "valid",
    30: "error overflow (multiple errors)",
    29: "error uncorrected",
    28: "error enable",
    27: "misc error valid",
    26: "error address valid",
    25: "processor context corrupt",
    24: "res24",
    23: "res23",
    14: "corrected ecc error",
    13: "uncorrected ecc error",
    12: "res12",
    11: "L3 subcache in error bit 1",
    10: "L3 subcache in error bit 0",
    9: "sublink or DRAM channel",
    8: "error found by scrub",
    3: "err cpu3",
    2: "err cpu2",
    1: "err cpu1",
    0: "err cpu0",
}
_HIGHBITS = tuple(_HIGHBITS_NAMES.get(i) for i in range(32))
# Entry i of the table describes status bit i + 1; status bit 5 hides it all.
_HIGHBITS_OFFSET = 1
_HIGHBITS_IGNORE = 32


def _exterrcode(status: int) -> int:
    return (status >> 16) & 0x0F


def _decode_generic_errcode(event: MceEvent) -> None:
    status = event.status
    errcode = status & 0xFFFF

    text = bitfield_msg(_HIGHBITS, _HIGHBITS_OFFSET, _HIGHBITS_IGNORE, status)
    if text:
        event.add("error_msg", f"({text}) ")

    if (errcode & 0xFFF0) == 0x0010:
        event.add(
            "error_msg",
            f"LB error '{_TRANSACTION[(errcode >> 2) & 3]} transaction, "
            f"level {_CACHELEVEL[errcode & 3]}'",
        )
    elif (errcode & 0xFF00) == 0x0100:
        event.add(
            "error_msg",
            f"memory/cache error '{_MEMTRANS[(errcode >> 4) & 0xF]} mem transaction, "
            f"{_TRANSACTION[(errcode >> 2) & 3]} transaction, "
            f"level {_CACHELEVEL[errcode & 3]}'",
        )
    elif (errcode & 0xF800) == 0x0800:
        event.add(
            "error_msg",
            f"bus error '{_PARTPROC[(errcode >> 9) & 0x3]}, "
            f"{_TIMEOUT[(errcode >> 8) & 1]}: "
            f"{_MEMTRANS[(errcode >> 4) & 0xF]} mem transaction, "
            f"{_MEMORYIO[(errcode >> 2) & 0x3]} access, "
            f"level {_CACHELEVEL[errcode & 0x3]}'",
        )


def _tlb_parity(event: MceEvent) -> None:
    if (event.status & 0xFFF0) == 0x0010:
        kind = "physical" if _exterrcode(event.status) == 0 else "virtual"
        event.add("error_msg", f"TLB parity error in {kind} array")


def _decode_dc(event: MceEvent) -> None:
    status = event.status
    if status & (3 << 45):
        event.add("error_msg", f"Data cache ECC error (syndrome {(status >> 47) & 0xFF:x})")
        if status & (1 << 40):
            event.add("error_msg", "found by scrubber")
    _tlb_parity(event)


def _decode_ic(event: MceEvent) -> None:
    if event.status & (3 << 45):
        event.add("error_msg", "Instruction cache ECC error")
    _tlb_parity(event)


def _decode_bu(event: MceEvent) -> None:
    if event.status & (3 << 45):
        event.add("error_msg", "L2 cache ECC error")
    kind = "Bus or cache" if not _exterrcode(event.status) else "Cache tag"
    event.add("error_msg", f"{kind} array error")


def _decode_nb(event: MceEvent) -> bool:
    """Decode a northbridge error; True if it is a memory error."""
    status = event.status
    exterrcode = _exterrcode(status)
    event.add("error_msg", f"Northbridge {_NBEXTENDEDERR[exterrcode]}")

    if exterrcode == 0:
        event.add("error_msg", f"ECC syndrome = {(status >> 47) & 0xFF:x}")
        return True
    if exterrcode == 8:
        syndrome = (((status >> 24) & 0xFF) << 8) | ((status >> 47) & 0xFF)
        event.add("error_msg", f"Chipkill ECC syndrome = {syndrome:x}")
        return True
    if exterrcode in (1, 2, 3, 4, 6):
        event.add("error_msg", f"link number = {(status >> 36) & 0xF:x}")
    return False


def _decode_threshold(event: MceEvent) -> None:
    if event.misc & MCI_THRESHOLD_OVER:
        event.add("error_msg", "Threshold error count overflow")


def _bank_name(event: MceEvent) -> None:
    bank = event.bank
    if 0 <= bank < len(_K8BANK):
        name = _K8BANK[bank]
    elif K8_MCE_THRESHOLD_BASE <= bank < K8_MCE_THRESHOLD_TOP:
        name = _K8THRESHOLD.get(bank - K8_MCE_THRESHOLD_BASE, "Unknown threshold counter")
    else:
        return
    event.add("bank_name", f"{name} (bank={bank})")


def parse_amd_k8_event(event: MceEvent) -> bool:
    """Decode a K8 event; False if it is a GART error that is not handled."""
    if event.bank == 4 and _exterrcode(event.status) == 5 and event.status & (1 << 61):
        return False

    _bank_name(event)

    memerr = False
    bank = event.bank
    if bank == 0:
        _decode_dc(event)
        _decode_generic_errcode(event)
    elif bank == 1:
        _decode_ic(event)
        _decode_generic_errcode(event)
    elif bank == 2:
        _decode_bu(event)
        _decode_generic_errcode(event)
    elif bank in (3, 5):
        _decode_generic_errcode(event)
    elif bank == 4:
        memerr = _decode_nb(event)
        _decode_generic_errcode(event)
    elif K8_MCE_THRESHOLD_BASE <= bank <= K8_MCE_THRESHOLD_TOP:
        _decode_threshold(event)
    else:
        event.set("error_msg", "Don't know how to decode this bank")

    # The instruction pointer is meaningless for memory errors
    if memerr:
        event.ip = 0
    return True