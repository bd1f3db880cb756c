"""
rngkit.charset
==============

Alphabet validation and string assembly.

Each output symbol is chosen with a *single* raw byte reduced modulo the
alphabet size. This is a plain modulo, not rejection sampling: when the size
does not divide 256 some symbols get ``ceil(256/size)`` of the 256 byte values
and the rest get ``floor(256/size)``. Such alphabets still work but trigger an
`EntropySkewWarning`. Sizes above 256 leave every symbol past index 255
unreachable.

Duplicates are removed by default (first occurrence wins). Keeping them with
``remove_duplicates=False`` weights each symbol by its multiplicity; the
"at least two distinct symbols" rule is checked against the distinct set
either way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Iterable, Optional, Tuple, Union

from .constants import BYTE_SPAN, DEFAULT_CHARSET, WARNING_ENTROPY_COMPROMISED
from .errors import EntropySkewWarning, InvalidAlphabet, advise
from .metrics import METRICS, Metrics

logger = logging.getLogger(__name__)

CharacterSet = Union[str, Iterable[str]]


def _distinct(symbols: Iterable[str]) -> Tuple[str, ...]:
    # dict preserves insertion order, so the first occurrence wins
    return tuple(dict.fromkeys(symbols))


@dataclass(frozen=True)
class Charset:
    """An ordered symbol alphabet for string generation."""

    symbols: Tuple[str, ...]

    @classmethod
    def build(cls, characters: CharacterSet, *, remove_duplicates: bool = True) -> "Charset":
        """
        Normalize *characters* (a string or an iterable of one-character
        strings) into a `Charset`.

        Raises:
            InvalidAlphabet: fewer than two distinct symbols, or an item that is
                not a single character.
        """
        symbols = tuple(characters)
        for s in symbols:
            if not isinstance(s, str) or len(s) != 1:
                raise InvalidAlphabet(
                    reason=f"Charset items must be single characters, got {s!r}",
                    distinct=len(_distinct(x for x in symbols if isinstance(x, str))),
                )
        distinct = _distinct(symbols)
        if len(distinct) <= 1:
            raise InvalidAlphabet(distinct=len(distinct))
        return cls(distinct if remove_duplicates else symbols)

    @property
    def size(self) -> int:
        return len(self.symbols)

    @property
    def distinct(self) -> int:
        return len(set(self.symbols))

    @property
    def balanced(self) -> bool:
        """True when every byte value maps onto the alphabet evenly."""
        return BYTE_SPAN % self.size == 0

    def weights(self) -> Dict[str, Fraction]:
        """Exact output probability of each distinct symbol."""
        out: Dict[str, Fraction] = {}
        for idx in range(min(self.size, BYTE_SPAN)):
            # byte values b with b % size == idx
            hits = len(range(idx, BYTE_SPAN, self.size))
            sym = self.symbols[idx]
            out[sym] = out.get(sym, Fraction(0)) + Fraction(hits, BYTE_SPAN)
        for sym in self.symbols:
            out.setdefault(sym, Fraction(0))
        return out

    def advise(self, metrics: Optional[Metrics] = None) -> bool:
        """
        Emit an `EntropySkewWarning` if the alphabet is unbalanced.
        Returns True when an advisory was emitted.
        """
        if self.balanced:
            return False
        msg = f"{WARNING_ENTROPY_COMPROMISED} (alphabet size {self.size})"
        if self.size > BYTE_SPAN:
            msg += f"; symbols past index {BYTE_SPAN - 1} are never selected"
        advise(msg, EntropySkewWarning, logger=logger, stacklevel=4)
        (metrics or METRICS).record_advisory("entropy_skew")
        return True

    def assemble(self, raw: bytes) -> str:
        """Map each raw byte onto a symbol: one output character per byte."""
        size = self.size
        return "".join(self.symbols[b % size] for b in raw)

    def __str__(self) -> str:
        return "".join(self.symbols)


DEFAULT = Charset.build(DEFAULT_CHARSET)

__all__ = ["Charset", "CharacterSet", "DEFAULT"]
