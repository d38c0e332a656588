# src/rs/rscoder.py

import logging
import operator
from typing import Iterable, List, Optional, Sequence, Tuple

from .exceptions import (
    ErrorLocationFailed,
    MessageTooLong,
    RootSearchMismatch,
    TooManyErasures,
    TooManyErrors,
    UncorrectableMessage,
)
from .mathutils import FIELD_CHARAC, GaloisField, init_tables

log = logging.getLogger(__name__)


class RsDecoder:
    """
    Reed-Solomon errors-and-erasures decoder over GF(2^8).

    Corrects e errors and v erasures whenever 2e + v <= nsym, via Forney
    syndromes + Berlekamp-Massey + Chien search + the Forney algorithm.
    Codewords are message symbols followed by nsym ECC symbols; codeword[0]
    is the coefficient of highest degree.
    """

    def __init__(self, field: Optional[GaloisField] = None):
        self.gf = field if field is not None else init_tables()

    # ------------------------------------------------------------------
    # Syndromes
    # ------------------------------------------------------------------

    def calc_syndromes(self, msg: Sequence[int], nsym: int) -> List[int]:
        """
        Evaluate msg at 2^(i+fcr) for i in [0, nsym).

        A 0 is prepended for the constant term, so the result has nsym + 1
        coefficients and every polynomial derived from it is shifted by one
        degree (error positions are unaffected).
        """
        gf = self.gf
        return [0] + [gf.poly_eval(msg, gf.pow(2, i + gf.fcr)) for i in range(nsym)]

    @staticmethod
    def is_clean(synd: Sequence[int]) -> bool:
        return not any(synd)

    def check(self, msg: Sequence[int], nsym: int) -> bool:
        """True if msg is a valid codeword (no errors or erasures detected)."""
        if not 0 <= nsym <= len(msg):
            raise ValueError(f"nsym must be in [0, {len(msg)}], got {nsym}")
        return self.is_clean(self.calc_syndromes(msg, nsym))

    def forney_syndromes(self, synd: Sequence[int], pos: Sequence[int], nmess: int) -> List[int]:
        """
        Modified syndromes with the erasures at `pos` trimmed out, so that
        Berlekamp-Massey only has to find the unknown errors.

        Returns len(synd) - 1 coefficients (the leading pad is dropped).
        """
        gf = self.gf
        erase_pos_reversed = [nmess - 1 - p for p in pos]

        fsynd = list(synd[1:])
        for p in erase_pos_reversed:
            x = gf.pow(2, p)
            for j in range(len(fsynd) - 1):
                fsynd[j] = gf.mul(fsynd[j], x) ^ fsynd[j + 1]
        return fsynd

    # ------------------------------------------------------------------
    # Berlekamp-Massey
    # ------------------------------------------------------------------

    def find_error_locator(
        self,
        synd: Sequence[int],
        nsym: int,
        erase_loc: Optional[Sequence[int]] = None,
        erase_count: int = 0,
    ) -> List[int]:
        """
        Errata locator polynomial (highest degree first, constant term last).

        When `erase_loc` is given the search starts from it, so the erasures
        are part of the result and the full syndrome must be passed. With
        Forney syndromes the erasures are already gone: pass no `erase_loc`
        but still pass `erase_count` so the cost bound accounts for them.

        Raises TooManyErrors if 2*errors + erasures would exceed nsym.
        """
        gf = self.gf
        erase_loc = list(erase_loc) if erase_loc else []
        if erase_loc:
            err_loc = list(erase_loc)
            old_loc = list(erase_loc)
        else:
            err_loc = [1]
            old_loc = [1]

        # the prepended 0 of a full syndrome makes it longer than nsym
        synd_shift = len(synd) - nsym if len(synd) > nsym else 0

        for i in range(nsym - erase_count):
            if erase_loc:
                # skip the first erase_count iterations, the erasures are known
                K = erase_count + i + synd_shift
            else:
                K = i + synd_shift

            # discrepancy: coefficient K of err_loc[::-1] * synd, computed alone
            delta = synd[K]
            for j in range(1, len(err_loc)):
                delta ^= gf.mul(err_loc[-(j + 1)], synd[K - j])

            old_loc = old_loc + [0]

            if delta != 0:
                if len(old_loc) > len(err_loc):
                    new_loc = gf.poly_scale(old_loc, delta)
                    old_loc = gf.poly_scale(err_loc, gf.inverse(delta))
                    err_loc = new_loc
                err_loc = gf.poly_add(err_loc, gf.poly_scale(old_loc, delta))

        while len(err_loc) > 1 and err_loc[0] == 0:
            err_loc = err_loc[1:]

        errs = len(err_loc) - 1
        if (errs - len(erase_loc)) * 2 + (erase_count - len(erase_loc)) > nsym:
            log.warning(f"Locator of degree {errs} with {erase_count} erasures exceeds nsym={nsym}")
            raise TooManyErrors(errs, erase_count, nsym)

        log.debug(f"Error locator: {err_loc}")
        return err_loc

    # ------------------------------------------------------------------
    # Chien search
    # ------------------------------------------------------------------

    def find_errors(self, err_loc: Sequence[int], nmess: int) -> List[int]:
        """
        Brute-force root search of the REVERSED error locator over the
        positions of a codeword of length nmess.

        Raises RootSearchMismatch if the number of roots found differs from
        the degree of the locator.
        """
        gf = self.gf
        errs = len(err_loc) - 1
        err_pos = [
            nmess - 1 - i
            for i in range(nmess)
            if gf.poly_eval(err_loc, gf.pow(2, i)) == 0
        ]
        if len(err_pos) != errs:
            log.warning(f"Chien search found {len(err_pos)} roots for a locator of degree {errs}")
            raise RootSearchMismatch(len(err_pos), errs)
        return err_pos

    # ------------------------------------------------------------------
    # Forney algorithm
    # ------------------------------------------------------------------

    def errata_locator(self, coef_pos: Iterable[int]) -> List[int]:
        """prod(1 + 2^p x) over the coefficient degrees p of the errata."""
        gf = self.gf
        e_loc = [1]
        for p in coef_pos:
            e_loc = gf.poly_mul(e_loc, gf.poly_add([1], [gf.pow(2, p), 0]))
        return e_loc

    def error_evaluator(self, synd: Sequence[int], err_loc: Sequence[int], nsym: int) -> List[int]:
        """Omega(x) = (synd(x) * err_loc(x)) mod x^(nsym+1)."""
        gf = self.gf
        _, remainder = gf.poly_div(gf.poly_mul(synd, err_loc), [1] + [0] * (nsym + 1))
        return remainder

    def forney_magnitudes(
        self,
        nmess: int,
        err_eval: Sequence[int],
        locations: Sequence[int],
        err_pos: Sequence[int],
    ) -> List[int]:
        """
        Errata magnitude polynomial: the value to XOR at each position.

        locations[i] is the field element X_i of the errata at err_pos[i].
        Each magnitude is X^(1-fcr) * Omega(X^-1) / prod_{j != i}(1 - X_j X^-1).
        """
        gf = self.gf
        E = [0] * nmess
        for i, Xi in enumerate(locations):
            Xi_inv = gf.inverse(Xi)

            # formal derivative of the errata locator, evaluated at Xi_inv
            err_loc_prime = 1
            for j, Xj in enumerate(locations):
                if j != i:
                    err_loc_prime = gf.mul(err_loc_prime, gf.sub(1, gf.mul(Xi_inv, Xj)))

            y = gf.poly_eval(err_eval, Xi_inv)
            # TODO: validate 1 - fcr against reference vectors for fcr > 1
            y = gf.mul(gf.pow(Xi, 1 - gf.fcr), y)

            E[err_pos[i]] = gf.div(y, err_loc_prime)
        return E

    def apply_correction(self, msg: Sequence[int], E: Sequence[int]) -> List[int]:
        return self.gf.poly_add(msg, E)

    def correct_errata(self, msg: Sequence[int], synd: Sequence[int], err_pos: Sequence[int]) -> List[int]:
        """
        Repair msg given the full syndrome and every errata position
        (erasures and located errors alike). ECC symbols are repaired too.
        """
        gf = self.gf
        coef_pos = [len(msg) - 1 - p for p in err_pos]
        err_loc = self.errata_locator(coef_pos)
        # evaluator works on the syndrome with its lowest degree first
        err_eval = self.error_evaluator(synd[::-1], err_loc, len(err_loc) - 1)
        locations = [gf.pow(2, p) for p in coef_pos]

        E = self.forney_magnitudes(len(msg), err_eval, locations, err_pos)
        return self.apply_correction(msg, E)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(
        self,
        codeword: Iterable[int],
        nsym: int,
        erase_pos: Optional[Iterable[int]] = None,
    ) -> Tuple[List[int], List[int]]:
        """
        Correct codeword and split it into (message, ecc).

        erase_pos lists the indices of symbols known to be unreliable. Each
        erasure costs one ECC symbol and each unknown error two.
        The input is never modified.
        """
        msg_out = [int(c) for c in codeword]
        nmess = len(msg_out)
        if nmess > FIELD_CHARAC:
            raise MessageTooLong(nmess, FIELD_CHARAC)
        if not 0 <= nsym <= nmess:
            raise ValueError(f"nsym must be in [0, {nmess}], got {nsym}")
        if any(not 0 <= c <= 0xff for c in msg_out):
            raise ValueError("Codeword symbols must be in [0, 255]")

        # operator.index rejects floats such as 4.7 instead of truncating them
        erase_pos = list(dict.fromkeys(operator.index(e) for e in erase_pos)) if erase_pos is not None else []
        for e in erase_pos:
            if not 0 <= e < nmess:
                raise ValueError(f"Erasure position {e} outside codeword of length {nmess}")
            # zeroed so the locator depends only on where the errors are
            msg_out[e] = 0

        if len(erase_pos) > nsym:
            raise TooManyErasures(len(erase_pos), nsym)

        synd = self.calc_syndromes(msg_out, nsym)
        if self.is_clean(synd):
            return msg_out[:nmess - nsym], msg_out[nmess - nsym:]
        log.debug(f"Syndrome: {synd}")

        fsynd = self.forney_syndromes(synd, erase_pos, nmess)
        # erasures are already out of the Forney syndrome, do not seed them
        err_loc = self.find_error_locator(fsynd, nsym, erase_count=len(erase_pos))

        err_pos = self.find_errors(err_loc[::-1], nmess)
        if not err_pos and not erase_pos:
            log.warning("Non-zero syndrome but no error located")
            raise ErrorLocationFailed()
        log.debug(f"Error positions: {err_pos}")

        # full syndrome here: erasures and errors are corrected together
        msg_out = self.correct_errata(msg_out, synd, erase_pos + err_pos)

        if not self.check(msg_out, nsym):
            log.warning("Syndrome still not clean after correction")
            raise UncorrectableMessage()

        log.info(f"Corrected {len(err_pos)} errors and {len(erase_pos)} erasures "
                 f"at positions {sorted(erase_pos + err_pos)}")
        return msg_out[:nmess - nsym], msg_out[nmess - nsym:]


def decode(
    codeword: Iterable[int],
    nsym: int,
    erase_pos: Optional[Iterable[int]] = None,
    field: Optional[GaloisField] = None,
) -> Tuple[List[int], List[int]]:
    """Decode with a throwaway RsDecoder over `field` (default: init_tables())."""
    return RsDecoder(field).decode(codeword, nsym, erase_pos)


def check(codeword: Sequence[int], nsym: int, field: Optional[GaloisField] = None) -> bool:
    return RsDecoder(field).check(list(codeword), nsym)
