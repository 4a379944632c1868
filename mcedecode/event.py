"""Machine-check event record, CPU identification and status-register bits."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MCE_EXTENDED_BANK = 128

MCG_STATUS_RIPV = 1 << 0
MCG_STATUS_EIPV = 1 << 1
MCG_STATUS_MCIP = 1 << 2
MCG_STATUS_LMCE = 1 << 3

MCI_STATUS_VAL = 1 << 63
MCI_STATUS_OVER = 1 << 62
MCI_STATUS_UC = 1 << 61
MCI_STATUS_EN = 1 << 60
MCI_STATUS_MISCV = 1 << 59
MCI_STATUS_ADDRV = 1 << 58
MCI_STATUS_PCC = 1 << 57
MCI_STATUS_S = 1 << 56
MCI_STATUS_AR = 1 << 55

# AMD-specific status bits
MCI_STATUS_TCC = 1 << 55
MCI_STATUS_DEFERRED = 1 << 44
MCI_STATUS_POISON = 1 << 43

MCI_THRESHOLD_OVER = 1 << 48

TEXT_FIELDS = frozenset(
    {
        "bank_name",
        "error_msg",
        "mcgstatus_msg",
        "mcistatus_msg",
        "mcastatus_msg",
        "user_action",
        "mc_location",
    }
)


class CpuType(enum.Enum):
    """Processor families that have model-specific decoders."""

    GENERIC = enum.auto()
    P6OLD = enum.auto()
    CORE2 = enum.auto()
    K8 = enum.auto()
    P4 = enum.auto()
    NEHALEM = enum.auto()
    DUNNINGTON = enum.auto()
    TULSA = enum.auto()
    XEON75XX = enum.auto()
    SANDY_BRIDGE = enum.auto()
    SANDY_BRIDGE_EP = enum.auto()
    IVY_BRIDGE_EPEX = enum.auto()
    HASWELL_EPEX = enum.auto()
    BROADWELL_DE = enum.auto()
    BROADWELL_EPEX = enum.auto()
    KNIGHTS_LANDING = enum.auto()
    KNIGHTS_MILL = enum.auto()
    SKYLAKE_XEON = enum.auto()
    AMD_SMCA = enum.auto()
    ICELAKE_XEON = enum.auto()
    ICELAKE_DE = enum.auto()
    TREMONT_D = enum.auto()
    SAPPHIRERAPIDS = enum.auto()
    EMERALDRAPIDS = enum.auto()


@dataclass
class McePriv:
    """Per-system decoding context: CPU type, family and model."""

    cputype: CpuType = CpuType.GENERIC
    family: int = 0
    model: int = 0


@dataclass
class MceEvent:
    """One machine-check record together with its decoded text."""

    mcgcap: int = 0
    mcgstatus: int = 0
    status: int = 0
    addr: int = 0
    misc: int = 0
    ip: int = 0
    tsc: int = 0
    walltime: int = 0
    cpu: int = 0
    cpuid: int = 0
    apicid: int = 0
    socketid: int = 0
    cs: int = 0
    bank: int = 0
    cpuvendor: int = 0
    synd: int = 0
    ipid: int = 0
    vdata: list[int] = field(default_factory=list)

    bank_name: str = ""
    error_msg: str = ""
    mcgstatus_msg: str = ""
    mcistatus_msg: str = ""
    mcastatus_msg: str = ""
    user_action: str = ""
    mc_location: str = ""
    frutext: bytes = b""

    @staticmethod
    def _check(name: str) -> None:
        if name not in TEXT_FIELDS:
            raise ValueError(f"not a text field of an event: {name!r}")

    def add(self, field: str, text: str) -> None:
        """Append text to a message field, separated by one space."""
        self._check(field)
        current = getattr(self, field)
        setattr(self, field, f"{current} {text}" if current else text)

    def set(self, field: str, text: str) -> None:
        """Replace the content of a message field."""
        self._check(field)
        setattr(self, field, text)