# src/rs/mathutils.py

import logging
from functools import lru_cache
from typing import List, Sequence, Tuple

import numpy as np

from .exceptions import GFDivisionByZero

log = logging.getLogger(__name__)

# Multiplicative order of GF(2^8): number of nonzero field elements.
FIELD_CHARAC = 255


class GaloisField:
    """
    GF(2^8) arithmetic context built from a primitive polynomial.

    Holds the antilog table `exp` (510 entries, the second half mirrors the
    first so log sums up to 508 need no reduction), the log table `log`
    (256 entries, log[0] unused) and the first consecutive root `fcr` of the
    code the tables are used with. Tables are read-only numpy arrays, so a
    single instance can be shared by any number of decoders.

    Polynomials are plain lists of symbols with the highest-degree
    coefficient first, e.g. 5x^2 + 2x + 1 == [5, 2, 1].
    """

    def __init__(self, prim: int = 0x11d, fcr: int = 0):
        if not isinstance(prim, int) or not 0 <= prim <= 0x1ff:
            raise ValueError(f"Primitive polynomial must be in [0, 511], got {prim}")
        if not isinstance(fcr, int) or fcr < 0:
            raise ValueError(f"fcr must be a non-negative integer, got {fcr}")
        # x^8 term is implied when only the low byte is given
        prim |= 0x100

        exp = np.zeros(2 * FIELD_CHARAC, dtype=np.int64)
        logt = np.zeros(FIELD_CHARAC + 1, dtype=np.int64)
        x = 1
        for i in range(FIELD_CHARAC):
            exp[i] = x
            logt[x] = i
            x <<= 1
            if x & 0x100:
                x ^= prim
        exp[FIELD_CHARAC:] = exp[:FIELD_CHARAC]

        # a non-primitive polynomial cycles early (or collapses to 0)
        if np.unique(exp[:FIELD_CHARAC]).size != FIELD_CHARAC or not exp[:FIELD_CHARAC].all():
            raise ValueError(f"0x{prim:x} is not a primitive polynomial of GF(2^8)")

        exp.setflags(write=False)
        logt.setflags(write=False)
        self._exp, self._log = exp, logt
        # plain int tuples for the scalar lookups in the decoding loops
        self._exp_t, self._log_t = tuple(exp.tolist()), tuple(logt.tolist())
        self._prim, self._fcr = prim, fcr
        log.info(f"GaloisField(prim=0x{prim:x}, fcr={fcr})")

    @property
    def exp(self) -> np.ndarray:
        return self._exp

    @property
    def log(self) -> np.ndarray:
        return self._log

    @property
    def prim(self) -> int:
        return self._prim

    @property
    def fcr(self) -> int:
        return self._fcr

    def __repr__(self) -> str:
        return f"GaloisField(prim=0x{self._prim:x}, fcr={self._fcr})"

    # ------------------------------------------------------------------
    # Scalar arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def add(x: int, y: int) -> int:
        return x ^ y

    @staticmethod
    def sub(x: int, y: int) -> int:
        # characteristic 2: subtraction is addition
        return x ^ y

    def mul(self, x: int, y: int) -> int:
        if x == 0 or y == 0:
            return 0
        return self._exp_t[self._log_t[x] + self._log_t[y]]

    def div(self, x: int, y: int) -> int:
        if y == 0:
            raise GFDivisionByZero()
        if x == 0:
            return 0
        return self._exp_t[(self._log_t[x] + FIELD_CHARAC - self._log_t[y]) % FIELD_CHARAC]

    def pow(self, x: int, power: int) -> int:
        """
        x**power in the field. Negative powers are reduced modulo 255 like
        any other, so pow(x, -1) is the inverse of x.
        """
        if x == 0:
            if power < 0:
                raise GFDivisionByZero("Zero has no negative powers in GF field")
            return 0 if power > 0 else 1
        return self._exp_t[(self._log_t[x] * power) % FIELD_CHARAC]

    def inverse(self, x: int) -> int:
        if x == 0:
            raise GFDivisionByZero("Zero has no inverse in GF field")
        return self._exp_t[FIELD_CHARAC - self._log_t[x]]

    # ------------------------------------------------------------------
    # Polynomials (highest-degree coefficient first)
    # ------------------------------------------------------------------

    def poly_scale(self, p: Sequence[int], x: int) -> List[int]:
        return [self.mul(c, x) for c in p]

    @staticmethod
    def poly_add(p: Sequence[int], q: Sequence[int]) -> List[int]:
        """Sum (and difference) of p and q, aligned on their constant terms."""
        r = [0] * max(len(p), len(q))
        for i, c in enumerate(p):
            r[i + len(r) - len(p)] = c
        for i, c in enumerate(q):
            r[i + len(r) - len(q)] ^= c
        return r

    def poly_mul(self, p: Sequence[int], q: Sequence[int]) -> List[int]:
        r = [0] * (len(p) + len(q) - 1)
        for j, qj in enumerate(q):
            if qj == 0:
                continue
            for i, pi in enumerate(p):
                r[i + j] ^= self.mul(pi, qj)
        return r

    def poly_eval(self, p: Sequence[int], x: int) -> int:
        """
        Horner's scheme; p[0] is the leading coefficient, p[-1] the constant.
        The empty polynomial is the zero polynomial.
        """
        if not len(p):
            return 0
        y = p[0]
        for c in p[1:]:
            y = self.mul(y, x) ^ c
        return y

    def poly_div(self, dividend: Sequence[int], divisor: Sequence[int]) -> Tuple[List[int], List[int]]:
        """
        Extended synthetic division specialised for GF(2^8).

        Both operands are highest-degree first and the divisor is assumed
        monic (its leading coefficient is never used). Returns
        (quotient, remainder) where len(remainder) == len(divisor) - 1.
        """
        out = list(dividend)
        for i in range(len(dividend) - (len(divisor) - 1)):
            coef = out[i]
            if coef != 0:
                for j in range(1, len(divisor)):
                    if divisor[j] != 0:
                        out[i + j] ^= self.mul(divisor[j], coef)
        # the remainder is what is left of the last deg(divisor) terms
        separator = len(out) - (len(divisor) - 1)
        return out[:separator], out[separator:]


@lru_cache(maxsize=None)
def init_tables(prim: int = 0x11d, fcr: int = 0) -> GaloisField:
    """
    Return the shared field context for (prim, fcr), building it on first use.
    """
    return GaloisField(prim, fcr)
