"""Secret reconstruction from a quorum of GF(2^w) share lines.

Decoding proceeds in two passes over the accepted shares:

1. From the share indices alone, compute the Lagrange basis
   coefficients L_j(0). They are the same for every word of the secret.
2. For each word i, the secret word is sum_j share_j[i] * L_j, i.e. the
   interpolating polynomial evaluated at x = 0.

Shares beyond the quorum are still validated but take no part in the
arithmetic.
"""

import logging

from gfshamir.errors import (
    DuplicateShareIndex, InconsistentShare, LinearIndependenceViolation,
    QuorumInsufficient, ShareError, UnsupportedFieldWidth,
)
from gfshamir.gf2 import get_field
from gfshamir.shares import ShareRecord, parse_line
from gfshamir.words import pack_words, read_word

logger = logging.getLogger(__name__)


class ReconstructionSession:
    """Accepted shares plus the values computed from them.

    The first admitted share fixes quorum, width and value length for
    the whole session. The session is reconstructed at most once.
    """

    def __init__(self):
        self.quorum = 0
        self.width = 0
        self.word_count = 0
        self.share_length = 0          # bytes of value data per share
        self.x_values: list[int] = []
        self.raw_share_bytes = bytearray()
        self.coefficients: list[int] = []   # pass 1
        self.secret_words: list[int] = []   # pass 2
        self.ignored: list[int] = []        # indices seen after quorum
        self._seen: set[int] = set()
        self._done = False

    @property
    def shares_seen(self) -> int:
        return len(self._seen)

    @property
    def complete(self) -> bool:
        return self.quorum > 0 and len(self.x_values) == self.quorum

    def admit(self, record: ShareRecord, line_no: int = None) -> bool:
        """Add a validated record. Returns False if it was over quorum."""
        if not self._seen:
            self.quorum = record.quorum
            self.width = record.width
            self.share_length = len(record.value)
            self.word_count = record.word_count
        else:
            if record.width != self.width:
                raise InconsistentShare(
                    f"mismatched field width value {record.width}", line_no)
            if record.quorum != self.quorum:
                raise InconsistentShare(
                    f"mismatched quorum value {record.quorum}", line_no)
            if len(record.value) != self.share_length:
                raise InconsistentShare(
                    f"wrong share length {len(record.value)} bytes "
                    f"(expected {self.share_length})", line_no)
        if record.index in self._seen:
            raise DuplicateShareIndex(f"duplicate share index {record.index}", line_no)
        self._seen.add(record.index)

        if len(self.x_values) >= self.quorum:
            logger.warning("Ignoring share %d", record.index)
            self.ignored.append(record.index)
            return False
        self.x_values.append(record.index)
        self.raw_share_bytes.extend(record.value)
        return True

    def check_quorum(self):
        if not self._seen:
            raise QuorumInsufficient("no shares")
        if not self.complete:
            raise QuorumInsufficient(
                f"need {self.quorum} shares, got {len(self.x_values)}")

    def share_value(self, j: int, i: int) -> int:
        """Word i of accepted share j."""
        return read_word(self.width, self.raw_share_bytes, i,
                         base=j * self.share_length)

    def pass_1(self, field):
        """Compute the common coefficients L_j(0)."""
        k = self.quorum
        logger.debug("pass 1: k is %d", k)
        coefficients = []
        for j in range(k):
            c = field.lagrange_basis_at_zero(self.x_values, j)
            if c == field.zero():
                raise LinearIndependenceViolation(
                    f"Linear independence not satisfied for share {self.x_values[j]}")
            coefficients.append(c)
        self.coefficients = coefficients

    def pass_2(self, field) -> list:
        """Recover every secret word from the shares and coefficients."""
        logger.debug("pass 2: %d words, %d coefficients",
                     self.word_count, len(self.coefficients))
        words = []
        for i in range(self.word_count):
            acc = field.zero()
            for j, c in enumerate(self.coefficients):
                acc = field.add(acc, field.mul(self.share_value(j, i), c))
            words.append(acc)
        self.secret_words = words
        return words

    def reconstruct(self, field=None) -> bytes:
        """Run both passes and return the secret bytes."""
        if self._done:
            raise RuntimeError("Session already reconstructed")
        self.check_quorum()
        if field is None:
            field = get_field(self.width)
        elif field.width != self.width:
            raise UnsupportedFieldWidth(
                f"field width {field.width} does not match shares ({self.width})")
        self._done = True
        self.pass_1(field)
        self.pass_2(field)
        return pack_words(self.width, self.secret_words)


def load_session(lines) -> ReconstructionSession:
    """Parse and admit every share line, stopping at the first error."""
    session = ReconstructionSession()
    for line_no, line in enumerate(lines, 1):
        if not line.strip():
            continue
        session.admit(parse_line(line, line_no), line_no)
    session.check_quorum()
    return session


def combine_lines(lines, field=None) -> bytes:
    """Recover the secret from share lines."""
    return load_session(lines).reconstruct(field)


def validate_lines(lines) -> list:
    """Check every share line, collecting all input errors.

    Unlike load_session this does not stop at the first bad line.
    Returns a list of ShareError, empty when the input would combine.
    """
    session = ReconstructionSession()
    errors = []
    for line_no, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            session.admit(parse_line(line, line_no), line_no)
        except ShareError as e:
            errors.append(e)
    try:
        session.check_quorum()
    except QuorumInsufficient as e:
        errors.append(e)
    return errors
