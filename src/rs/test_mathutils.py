import numpy as np
import pytest

from rs.exceptions import GFDivisionByZero
from rs.mathutils import FIELD_CHARAC, GaloisField, init_tables


# -------------------------------------------------------------------------
# Tables
# -------------------------------------------------------------------------

def test_tables_prim_301(gf301):
    assert len(gf301.exp) == 2 * FIELD_CHARAC
    assert len(gf301.log) == FIELD_CHARAC + 1
    assert gf301.exp[10] == 180
    assert gf301.log[10] == 226
    # second half mirrors the first
    assert np.array_equal(gf301.exp[FIELD_CHARAC:], gf301.exp[:FIELD_CHARAC])


@pytest.mark.parametrize("prim", [0x11d, 0x12d, 0x187])
def test_tables_are_a_permutation(prim):
    gf = GaloisField(prim)
    assert sorted(gf.exp[:FIELD_CHARAC].tolist()) == list(range(1, 256))
    for x in range(1, 256):
        assert gf.exp[gf.log[x]] == x


def test_implied_x8_term():
    assert np.array_equal(GaloisField(0x1d).exp, GaloisField(0x11d).exp)


@pytest.mark.parametrize("prim", [0x100, 0x101, 0x11b, 0x200, -1])
def test_rejects_non_primitive_polynomials(prim):
    # 0x11b is the AES polynomial: irreducible, but 2 does not generate the field
    with pytest.raises(ValueError):
        GaloisField(prim)


def test_rejects_negative_fcr():
    with pytest.raises(ValueError):
        GaloisField(0x11d, -1)


def test_tables_are_read_only(gf301):
    with pytest.raises(ValueError):
        gf301.exp[0] = 3
    with pytest.raises(AttributeError):
        gf301.fcr = 0


def test_init_tables_shares_context():
    assert init_tables(0x12d, 1) is init_tables(0x12d, 1)
    assert init_tables(0x12d, 1) is not init_tables(0x12d, 0)


# -------------------------------------------------------------------------
# Scalar arithmetic
# -------------------------------------------------------------------------

def test_scalar_reference_values(gf301):
    assert gf301.add(2, 14) == 12
    assert gf301.sub(2, 14) == 12
    assert gf301.mul(2, 14) == 28
    assert gf301.mul(0, 14) == 0
    assert gf301.div(2, 14) == 197
    assert gf301.div(0, 14) == 0
    assert gf301.pow(5, 2) == 17
    assert gf301.pow(15, -1) == 52
    assert gf301.inverse(2) == 150


def test_division_by_zero(gf301):
    with pytest.raises(GFDivisionByZero):
        gf301.div(2, 0)
    with pytest.raises(ZeroDivisionError):
        gf301.inverse(0)
    with pytest.raises(GFDivisionByZero):
        gf301.pow(0, -1)
    assert gf301.pow(0, 0) == 1
    assert gf301.pow(0, 3) == 0


def test_inverse_and_division_identities(gf301):
    for x in range(1, 256):
        assert gf301.mul(x, gf301.inverse(x)) == 1
        assert gf301.inverse(x) == gf301.div(1, x) == gf301.pow(x, -1)
    for x in range(256):
        for y in range(1, 256, 7):
            assert gf301.div(gf301.mul(x, y), y) == x


@pytest.mark.parametrize("prim", [0x11d, 0x12d])
def test_agrees_with_galois(prim, reference_field, rng):
    gf = GaloisField(prim)
    GF = reference_field(prim)
    a = rng.integers(0, 256, size=300)
    b = rng.integers(1, 256, size=300)
    e = rng.integers(-300, 300, size=300)

    prod = GF(a) * GF(b)
    quot = GF(a) / GF(b)
    for i in range(300):
        assert gf.mul(int(a[i]), int(b[i])) == int(prod[i])
        assert gf.div(int(a[i]), int(b[i])) == int(quot[i])
        assert gf.pow(int(b[i]), int(e[i])) == int(GF(int(b[i])) ** int(e[i]))


# -------------------------------------------------------------------------
# Polynomials
# -------------------------------------------------------------------------

def test_poly_scale(gf301):
    assert gf301.poly_scale([2, 15, 252, 3], 3) == [6, 17, 41, 5]


def test_poly_add(gf301):
    assert gf301.poly_add([5, 11, 156, 163], [2, 15, 252, 3]) == [7, 4, 96, 160]
    # aligned on the constant term
    assert gf301.poly_add([5, 11, 156, 163, 199], [2, 15, 252, 3]) == [5, 9, 147, 95, 196]
    assert gf301.poly_add([2, 15, 252, 3], [5, 11, 156, 163, 199]) == [5, 9, 147, 95, 196]


def test_poly_mul(gf301):
    assert gf301.poly_mul([5, 11, 156, 163], [2, 15, 252, 3]) == [10, 37, 7, 153, 10, 70, 200]


def test_poly_eval(gf301):
    assert gf301.poly_eval([2, 15, 252, 3], 3) == 7
    assert gf301.poly_eval([2, 15, 252, 3], 0) == 3
    assert gf301.poly_eval([2, 15, 252, 3], 1) == 2 ^ 15 ^ 252 ^ 3


def test_poly_div(gf301):
    quotient, remainder = gf301.poly_div([5, 11, 156, 163], [2, 15, 252, 3])
    assert quotient == [5]
    assert remainder == [56, 231, 172]


def test_poly_div_reconstructs_dividend(gf301, rng):
    for _ in range(20):
        dividend = rng.integers(0, 256, size=int(rng.integers(4, 30))).tolist()
        divisor = [1] + rng.integers(0, 256, size=int(rng.integers(1, 4))).tolist()
        quotient, remainder = gf301.poly_div(dividend, divisor)
        assert len(remainder) == len(divisor) - 1
        rebuilt = gf301.poly_add(gf301.poly_mul(quotient, divisor), remainder)
        assert rebuilt == dividend


def test_poly_eval_empty_is_zero(gf301):
    assert gf301.poly_eval([], 3) == 0


def test_scalar_results_are_python_ints(gf301):
    for value in (gf301.mul(3, 7), gf301.div(3, 7), gf301.pow(3, 7), gf301.inverse(3)):
        assert type(value) is int
