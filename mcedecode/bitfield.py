"""Generic decoders for bit fields of machine-check registers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .event import MceEvent


@dataclass(frozen=True)
class Field:
    """A field starting at ``start_bit`` whose value indexes ``names``."""

    start_bit: int
    names: tuple[str | None, ...] = ()

    @property
    def mask(self) -> int:
        limit = (len(self.names) - 1) & 0xFFFFFFFF
        return (1 << max(limit.bit_length(), 1)) - 1


@dataclass(frozen=True)
class NumField:
    """A numeric field spanning bits ``start`` to ``end`` inclusive."""

    start: int
    end: int
    name: str
    hex: bool = False
    force: bool = False


def field(start_bit: int, names: Sequence[str | None] | Mapping[int, str]) -> Field:
    """Field whose values name entries of a list or an index mapping."""
    if isinstance(names, Mapping):
        size = max(names) + 1 if names else 0
        return Field(start_bit, tuple(names.get(i) for i in range(size)))
    return Field(start_bit, tuple(names))


def sbitfield(start_bit: int, text: str) -> Field:
    """Single-bit field reported as ``text`` when set."""
    return Field(start_bit, (None, text))


def field_null(start_bit: int) -> Field:
    """Field with no names: any non-zero value is reported raw."""
    return Field(start_bit, ())


def number(start: int, end: int, name: str) -> NumField:
    return NumField(start, end, name)


def numberforce(start: int, end: int, name: str) -> NumField:
    return NumField(start, end, name, force=True)


def hexnumber(start: int, end: int, name: str) -> NumField:
    return NumField(start, end, name, hex=True)


def hexnumberforce(start: int, end: int, name: str) -> NumField:
    return NumField(start, end, name, hex=True, force=True)


def mask(bits: int) -> int:
    """Mask covering bits 0 through ``bits`` inclusive."""
    return (1 << (1 + bits)) - 1


def extract(value: int, start: int, end: int) -> int:
    """Bits ``start`` to ``end`` (inclusive) of ``value``."""
    return (value >> start) & mask(end - start)


def test_prefix(nr: int, value: int) -> bool:
    """True if the highest set bit of ``value`` is exactly bit ``nr``."""
    return (value >> nr) == 1


def bitfield_msg(
    bitarray: Sequence[str | None], bit_offset: int, ignore_bits: int, status: int
) -> str:
    """Comma-separated names of the set bits of ``status``.

    Entry ``i`` of ``bitarray`` names bit ``i + bit_offset``; unnamed bits
    are shown as ``BIT<n>``. Nothing is reported if any of ``ignore_bits``
    is set.
    """
    if status & ignore_bits:
        return ""
    parts = []
    for i, name in enumerate(bitarray):
        bit = i + bit_offset
        if (status >> bit) & 1:
            parts.append(name if name is not None else f"BIT{bit}")
    return ", ".join(parts)


def decode_bitfield(event: MceEvent, status: int, fields: Iterable[Field]) -> None:
    """Append the names of the field values found in ``status``."""
    for f in fields:
        value = (status >> f.start_bit) & f.mask
        text = f.names[value] if value < len(f.names) else None
        if text is None:
            if value == 0:
                continue
            event.add("error_msg", f"<{f.start_bit}:{value:x}>")
        else:
            event.add("error_msg", text)


def decode_numfield(event: MceEvent, status: int, fields: Iterable[NumField]) -> None:
    """Append ``name: value`` lines for the numeric fields of ``status``."""
    for f in fields:
        value = (status >> f.start) & ((1 << (f.end - f.start + 1)) - 1)
        if value > 0 or f.force:
            shown = f"{value:x}" if f.hex else f"{value}"
            event.add("error_msg", f"{f.name}: {shown}\n")