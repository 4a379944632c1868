"""Decoding of the architectural AMD MCA error code."""

from __future__ import annotations

from .event import (
    MCI_STATUS_DEFERRED,
    MCI_STATUS_OVER,
    MCI_STATUS_PCC,
    MCI_STATUS_UC,
    MCI_STATUS_VAL,
    MceEvent,
)

_TRANSACTION = ("instruction", "data", "generic", "reserved")
_CACHELEVEL = ("reserved", "L1", "L2", "L3/generic")
_MEMTRANS = (
    "generic", "generic read", "generic write", "data read",
    "data write", "instruction fetch", "prefetch", "evict", "snoop",
    "?", "?", "?", "?", "?", "?", "?",
)
_PARTPROC = (
    "local node origin", "local node response",
    "local node observed", "generic participation",
)
_TIMEOUT = ("request didn't time out", "request timed out")
_INTERNAL = ("reserved", "reserved", "hardware assert", "reserved")


def _tt(ec: int) -> str:
    return _TRANSACTION[(ec >> 2) & 0x3]


def _ll(ec: int) -> str:
    return _CACHELEVEL[ec & 0x3]


def _r4(ec: int) -> str:
    r4 = (ec >> 4) & 0xF
    return _MEMTRANS[r4] if r4 < 9 else "Wrong R4!"


def decode_amd_errcode(event: MceEvent) -> None:
    """Describe severity, status flags and the error code of an AMD event."""
    status = event.status
    ec = status & 0xFFFF
    ecc = (status >> 45) & 0x3

    if status & MCI_STATUS_UC:
        event.set("error_msg", "Uncorrected, software containable error.")
    elif status & MCI_STATUS_DEFERRED:
        event.set("error_msg", "Deferred error, no action required.")
    else:
        event.set("error_msg", "Corrected error, no action required.")

    if not status & MCI_STATUS_VAL:
        event.add("mcistatus_msg", "MCE_INVALID")
    if status & MCI_STATUS_OVER:
        event.add("mcistatus_msg", "Error_overflow")
    if status & MCI_STATUS_PCC:
        event.add("mcistatus_msg", "Processor_context_corrupt")
    if ecc:
        event.add("mcistatus_msg", f"{'C' if ecc == 2 else 'U'}ECC")

    if (ec & 0xF4FF) == 0x0400:
        event.add("mcastatus_msg", f"Internal '{_INTERNAL[(ec >> 8) & 0x3]}'")
        return

    if (ec & 0xFFF0) == 0x0010:
        event.add("mcastatus_msg", f"TLB Error 'tx: {_tt(ec)}, level: {_ll(ec)}'")
    elif (ec & 0xFF00) == 0x0100:
        event.add(
            "mcastatus_msg",
            f"Memory Error 'mem-tx: {_r4(ec)}, tx: {_tt(ec)}, level: {_ll(ec)}'",
        )
    elif (ec & 0xF800) == 0x0800:
        event.add(
            "mcastatus_msg",
            f"Bus Error '{_PARTPROC[(ec >> 9) & 0x3]}, {_TIMEOUT[(ec >> 8) & 0x1]}, "
            f"mem-tx: {_r4(ec)}, level: {_ll(ec)}'",
        )