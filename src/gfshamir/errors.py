"""Failure kinds for share parsing and secret reconstruction.

Every failure is fatal to the reconstruction attempt. Input failures
derive from ValueError and arithmetic failures from the matching builtin,
so callers that only catch builtins still see them.
"""


class ShamirError(Exception):
    """Base class. `line_no` is the 1-based input line, when known."""

    kind = 'ShamirError'

    def __init__(self, message: str, line_no: int = None):
        self.message = message
        self.line_no = line_no
        super().__init__(message)

    def __str__(self):
        if self.line_no is None:
            return self.message
        return f"line {self.line_no}: {self.message}"


class ShareError(ShamirError, ValueError):
    kind = 'ShareError'


class MalformedLine(ShareError):
    """Wrong field count, bad integer, trailing data or bad hex length."""
    kind = 'MalformedLine'


class InvalidHex(ShareError):
    kind = 'InvalidHex'


class UnsupportedFieldWidth(ShareError):
    kind = 'UnsupportedFieldWidth'


class BadQuorum(ShareError):
    kind = 'BadQuorum'


class BadShareIndex(ShareError):
    kind = 'BadShareIndex'


class InconsistentShare(ShareError):
    """Quorum, width or value length differs from the first share."""
    kind = 'InconsistentShare'


class DuplicateShareIndex(ShareError):
    kind = 'DuplicateShareIndex'


class QuorumInsufficient(ShareError):
    kind = 'QuorumInsufficient'


class DivisionByZero(ShamirError, ZeroDivisionError):
    kind = 'DivisionByZero'


class LinearIndependenceViolation(ShamirError, ArithmeticError):
    """A Lagrange coefficient came out as zero."""
    kind = 'LinearIndependenceViolation'
