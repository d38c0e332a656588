from functools import lru_cache

import galois
import numpy as np
import pytest

from rs.mathutils import init_tables
from rs.rscoder import RsDecoder


@pytest.fixture
def gf301():
    """Data Matrix style field; the reference vectors in the tests are for it."""
    return init_tables(0x12d, 1)


@pytest.fixture
def decoder(gf301):
    return RsDecoder(gf301)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@lru_cache(maxsize=None)
def _reference_code(prim: int, fcr: int, nsym: int):
    GF = galois.GF(2**8, irreducible_poly=prim, primitive_element=2)
    return GF, galois.ReedSolomon(255, 255 - nsym, c=fcr, field=GF)


@pytest.fixture
def reference_field():
    def build(prim: int):
        return galois.GF(2**8, irreducible_poly=prim, primitive_element=2)
    return build


@pytest.fixture
def encode():
    """Systematic (possibly shortened) RS encoder from galois, ints in and out."""
    def _encode(message, nsym: int, prim: int = 0x12d, fcr: int = 1):
        GF, rs = _reference_code(prim, fcr, nsym)
        return [int(c) for c in rs.encode(GF([int(m) for m in message]))]
    return _encode
