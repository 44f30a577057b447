"""Gabor lattice descriptor.

A lattice is fixed by the transform length ``L``, the time shift ``a``
and the number of channels ``M``. The factorization algorithms work on
the derived integers

    c = gcd(a, M),  p = a / c,  q = M / c,  b = L / M,  d = b / p = L / (a q)

which describe how the frame operator splits into ``c * d`` independent
``p x q`` blocks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import BadArgumentError, NotAFrameError, as_int, require_positive


def gcd(a: int, b: int) -> int:
    """Greatest common divisor of two integers."""
    return math.gcd(a, b)


def lcm(a: int, b: int) -> int:
    """Least common multiple of two positive integers."""
    return a // math.gcd(a, b) * b


def minimal_length(a: int, M: int) -> int:
    """Smallest transform length admissible for the lattice (a, M)."""
    a = require_positive(a, "a")
    M = require_positive(M, "M")
    return lcm(a, M)


def next_valid_length(Ls: int, a: int, M: int) -> int:
    """
    Smallest admissible transform length ``L >= Ls``.

    Args:
        Ls: Signal length (positive).
        a: Time shift.
        M: Number of channels.

    Returns:
        ``Ls`` rounded up to a multiple of ``lcm(a, M)``.
    """
    Ls = require_positive(Ls, "Ls")
    Lsmallest = minimal_length(a, M)
    return -(-Ls // Lsmallest) * Lsmallest


@dataclass(frozen=True)
class Lattice:
    """
    Validated lattice parameters and their derived block sizes.

    Attributes:
        L: Transform length.
        a: Time shift.
        M: Number of frequency channels.
        b: ``L / M``, the number of time positions per channel period.
        c: ``gcd(a, M)``.
        p: ``a / c``.
        q: ``M / c``.
        d: ``L / (a q)``, the length of the per-slot DFT.
    """

    L: int
    a: int
    M: int
    b: int
    c: int
    p: int
    q: int
    d: int

    @classmethod
    def from_params(cls, L: int, a: int, M: int) -> "Lattice":
        """
        Validate (L, a, M) and derive the block sizes.

        Raises:
            NotPositiveArgError: If a or M is not positive.
            NotAFrameError: If M < a.
            BadArgumentError: If L is not positive or not divisible by
                lcm(a, M), or an argument is not an integer.
        """
        a = require_positive(a, "a")
        M = require_positive(M, "M")
        L = as_int(L, "L")

        if M < a:
            raise NotAFrameError(f"Not a frame. Check if M>=a (passed a={a}, M={M}).")

        minL = lcm(a, M)
        if L <= 0 or L % minL:
            raise BadArgumentError(
                f"L (passed {L}) must be positive and divisible by lcm(a,M)={minL}."
            )

        c = gcd(a, M)
        p = a // c
        q = M // c
        b = L // M
        return cls(L=L, a=a, M=M, b=b, c=c, p=p, q=q, d=b // p)

    @property
    def N(self) -> int:
        """Number of time positions ``L / a``."""
        return self.L // self.a

    @property
    def redundancy(self) -> float:
        """Frame redundancy ``M / a``."""
        return self.M / self.a

    def __str__(self) -> str:
        return (
            f"L={self.L} a={self.a} M={self.M} "
            f"(b={self.b} c={self.c} p={self.p} q={self.q} d={self.d})"
        )


def lattice(L: int, a: int, M: int) -> Lattice:
    """Return the validated :class:`Lattice` for (L, a, M)."""
    return Lattice.from_params(L, a, M)
