# src/rs/exceptions.py

class ReedSolomonError(ValueError):
    """Base class for every decoding failure raised by this package."""


class MessageTooLong(ReedSolomonError):
    def __init__(self, length: int, max_length: int = 255):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Message is too long ({length} when max is {max_length})")


class TooManyErasures(ReedSolomonError):
    def __init__(self, erasures: int, nsym: int):
        self.erasures = erasures
        self.nsym = nsym
        super().__init__("Too many erasures to correct")


class TooManyErrors(ReedSolomonError):
    """
    Berlekamp-Massey produced a locator whose correction cost exceeds nsym.
    Errors cost 2 symbols each, erasures 1.
    """

    def __init__(self, errors: int, erasures: int, nsym: int):
        self.errors = errors
        self.erasures = erasures
        self.nsym = nsym
        super().__init__(
            f"Too many errors to correct: {errors * 2 + erasures} of max {nsym} "
            f"(Found at least {errors} errors and {erasures} erasures)"
        )


class ErrorLocationFailed(ReedSolomonError):
    def __init__(self):
        super().__init__("Could not calculate error positions")


class RootSearchMismatch(ReedSolomonError):
    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            "too many (or few) errors found by Chien Search for the errata "
            f"locator polynomial ({found} roots for degree {expected})"
        )


class UncorrectableMessage(ReedSolomonError):
    def __init__(self):
        super().__init__("Could not correct message")


class GFDivisionByZero(ReedSolomonError, ZeroDivisionError):
    def __init__(self, msg: str = "Division by zero in GF field"):
        super().__init__(msg)
