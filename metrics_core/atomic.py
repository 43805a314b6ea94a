"""Lock-free floating point cell.

A double is stored as its IEEE-754 bit pattern inside a 64-bit atomic
integer. Additions run a compare-and-swap retry loop; assignment is a
single atomic store or exchange. No mutex is involved, so concurrent
writers never block each other.
"""

from __future__ import annotations

import struct

import atomics

_DOUBLE = struct.Struct("<d")
_INT64 = struct.Struct("<q")


def _to_bits(value: float) -> int:
    return _INT64.unpack(_DOUBLE.pack(value))[0]


def _from_bits(bits: int) -> float:
    return _DOUBLE.unpack(_INT64.pack(bits))[0]


class AtomicFloat:
    """A float shared by concurrent writers."""

    __slots__ = ("_cell",)

    def __init__(self, value: float = 0.0):
        self._cell = atomics.atomic(width=8, atype=atomics.INT)
        self._cell.store(_to_bits(float(value)))

    def get(self) -> float:
        return _from_bits(self._cell.load())

    def set(self, value: float) -> None:
        self._cell.store(_to_bits(float(value)))

    def exchange(self, value: float) -> float:
        """Replace the value, returning the previous one."""
        return _from_bits(self._cell.exchange(_to_bits(float(value))))

    def compare_and_set(self, expected: float, new: float) -> bool:
        """Install ``new`` only if the cell still holds ``expected``.

        Comparison is on the bit pattern, so ``NaN`` matches itself and
        ``0.0`` does not match ``-0.0``.
        """
        result = self._cell.cmpxchg_strong(_to_bits(float(expected)), _to_bits(float(new)))
        return result.success

    def add(self, amount: float) -> float:
        """Atomically add ``amount`` and return the resulting value."""
        current = self._cell.load()
        while True:
            updated = _from_bits(current) + amount
            result = self._cell.cmpxchg_weak(current, _to_bits(updated))
            if result.success:
                return updated
            current = result.expected

    def __repr__(self) -> str:
        return f"AtomicFloat({self.get()!r})"


__all__ = ["AtomicFloat"]
