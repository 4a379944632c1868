"""Model-specific decoders for P4, P6 (old) and Core 2 processors."""

from __future__ import annotations

from .bitfield import decode_bitfield, decode_numfield, field, field_null, hexnumber, sbitfield
from .event import MceEvent

# Bits 19..24
_BUS_QUEUE_REQ_TYPE = {
    0: "BQ_DCU_READ_TYPE",
    2: "BQ_IFU_DEMAND_TYPE",
    3: "BQ_IFU_DEMAND_NC_TYPE",
    4: "BQ_DCU_RFO_TYPE",
    5: "BQ_DCU_RFO_LOCK_TYPE",
    6: "BQ_DCU_ITOM_TYPE",
    8: "BQ_DCU_WB_TYPE",
    10: "BC_DCU_WCEVICT_TYPE",
    11: "BQ_DCU_WCLINE_TYPE",
    12: "BQ_DCU_BTM_TYPE",
    13: "BQ_DCU_INTACK_TYPE",
    14: "BQ_DCU_INVALL2_TYPE",
    15: "BQ_DCU_FLUSHL2_TYPE",
    16: "BQ_DCU_PART_RD_TYPE",
    18: "BQ_DCU_PART_WR_TYPE",
    20: "BQ_DCU_SPEC_CYC_TYPE",
    24: "BQ_DCU_IO_RD_TYPE",
    25: "BQ_DCU_IO_WR_TYPE",
    28: "BQ_DCU_LOCK_RD_TYPE",
    29: "BQ_DCU_LOCK_WR_TYPE",
    30: "BQ_DCU_SPLOCK_RD_TYPE",
}

# Bits 25..27
_BUS_QUEUE_ERROR_TYPE = {
    0: "BQ_ERR_HARD_TYPE",
    1: "BQ_ERR_DOUBLE_TYPE",
    2: "BQ_ERR_AERR2_TYPE",
    4: "BQ_ERR_SINGLE_TYPE",
    5: "BQ_ERR_AERR1_TYPE",
}

_P6_SHARED_STATUS = (
    field_null(16),
    field(19, _BUS_QUEUE_REQ_TYPE),
    field(25, _BUS_QUEUE_ERROR_TYPE),
    field(25, _BUS_QUEUE_ERROR_TYPE),
    sbitfield(30, "internal BINIT"),
    sbitfield(36, "received parity error on response transaction"),
    sbitfield(38, "timeout BINIT (ROB timeout). No micro-instruction retired for some time"),
    field_null(39),
    sbitfield(42, "bus transaction received hard error response"),
    sbitfield(43, "failure that caused IERR"),
    # Reserved for Core in the SDM, decoded anyway.
    sbitfield(44, "two failing bus transactions with address parity error (AERR)"),
    sbitfield(45, "uncorrectable ECC error"),
    sbitfield(46, "correctable ECC error"),
    # Bits 47..54 hold the ECC syndrome.
    field_null(55),
)

_P6OLD_STATUS = (
    sbitfield(28, "FRC error"),
    sbitfield(29, "BERR on this CPU"),
    field_null(31),
    field_null(32),
    sbitfield(35, "BINIT received from external bus"),
    sbitfield(37, "Received hard error response on split transaction (Bus BINIT)"),
)

_CORE2_STATUS = (
    sbitfield(28, "MCE driven"),
    sbitfield(29, "MCE is observed"),
    sbitfield(31, "BINIT observed"),
    field_null(32),
    sbitfield(34, "PIC or FSB data parity error"),
    field_null(35),
    sbitfield(37, "FSB address parity error detected"),
)

_P6OLD_STATUS_NUMBERS = (hexnumber(47, 54, "ECC syndrome"),)

_P4_MODEL = (
    (16, "FSB address parity"),
    (17, "Response hard fail"),
    (18, "Response parity"),
    (19, "PIC and FSB data parity"),
    (20, "Invalid PIC request(Signature=0xF04H)"),
    (21, "Pad state machine"),
    (22, "Pad strobe glitch"),
    (23, "Pad address glitch"),
)


def p4_decode_model(event: MceEvent) -> None:
    """Decode the model-specific bits of a P4 event."""
    model = event.status & 0xFFFF0000
    for bit, text in _P4_MODEL:
        if model & (1 << bit):
            event.add("error_msg", text)


def core2_decode_model(event: MceEvent) -> None:
    """Decode the model-specific bits of a Core 2 event."""
    status = event.status
    decode_bitfield(event, status, _P6_SHARED_STATUS)
    decode_bitfield(event, status, _CORE2_STATUS)
    # Normally reserved, decoded anyway.
    decode_numfield(event, status, _P6OLD_STATUS_NUMBERS)


def p6old_decode_model(event: MceEvent) -> None:
    """Decode the model-specific bits of an old P6 event."""
    status = event.status
    decode_bitfield(event, status, _P6_SHARED_STATUS)
    decode_bitfield(event, status, _P6OLD_STATUS)
    decode_numfield(event, status, _P6OLD_STATUS_NUMBERS)