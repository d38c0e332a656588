from .exceptions import (
    ErrorLocationFailed,
    GFDivisionByZero,
    MessageTooLong,
    ReedSolomonError,
    RootSearchMismatch,
    TooManyErasures,
    TooManyErrors,
    UncorrectableMessage,
)
from .mathutils import FIELD_CHARAC, GaloisField, init_tables
from .rscoder import RsDecoder, check, decode

__all__ = [
    "FIELD_CHARAC",
    "GaloisField",
    "init_tables",
    "RsDecoder",
    "decode",
    "check",
    "ReedSolomonError",
    "MessageTooLong",
    "TooManyErasures",
    "TooManyErrors",
    "ErrorLocationFailed",
    "RootSearchMismatch",
    "UncorrectableMessage",
    "GFDivisionByZero",
]
