"""Share records and their one-line text form.

A share line is

    K=W=S=VALUES=

K is the quorum, W the field width in bits, S the share index (the
x-coordinate) and VALUES the hex-encoded share value of every word of
the secret, in order. Nothing may follow the final '='.
"""

import binascii
import re
from dataclasses import dataclass

from gfshamir.errors import (
    BadQuorum, BadShareIndex, InvalidHex, MalformedLine, UnsupportedFieldWidth,
)
from gfshamir.words import HEX_DIGITS_PER_WORD, word_count

_DECIMAL = re.compile(r'[0-9]+')

# Digits in the largest legal K, W or S value, 2^31.
MAX_DIGITS = len(str(1 << 31))


@dataclass(frozen=True)
class ShareRecord:
    """One parsed share line."""

    quorum: int
    width: int
    index: int
    value: bytes

    @property
    def word_count(self) -> int:
        return word_count(self.width, len(self.value))


def max_index(width: int) -> int:
    """Largest quorum or share index allowed for a width: 2^(w-1)."""
    return 1 << (width - 1)


def _parse_int(text: str, name: str, line_no) -> int:
    if not _DECIMAL.fullmatch(text):
        raise MalformedLine(f"{name} is not a decimal integer: {text!r}", line_no)
    if len(text.lstrip('0')) > MAX_DIGITS:
        raise MalformedLine(f"{name} is too long ({len(text)} digits)", line_no)
    return int(text)


def parse_line(line: str, line_no: int = None) -> ShareRecord:
    """Parse and validate one share line.

    Only checks what the line says about itself; agreement with other
    shares is the reconstruction session's job.
    """
    fields = line.strip().split('=')
    if len(fields) != 5:
        raise MalformedLine(
            f"wrong number of fields (expected 5, got {len(fields)})", line_no)
    k_text, w_text, s_text, hex_text, trailer = fields

    k = _parse_int(k_text, 'quorum', line_no)
    w = _parse_int(w_text, 'width', line_no)
    s = _parse_int(s_text, 'share index', line_no)
    if trailer:
        raise MalformedLine(f"unexpected data after final '=': {trailer!r}", line_no)

    if w not in HEX_DIGITS_PER_WORD:
        raise UnsupportedFieldWidth(f"bad field width {w}", line_no)
    digits = HEX_DIGITS_PER_WORD[w]

    if not 1 <= k <= max_index(w):
        raise BadQuorum(f"bad quorum value {k}", line_no)
    if not 1 <= s <= max_index(w):
        raise BadShareIndex(f"bad share index {s}", line_no)

    if not hex_text:
        raise MalformedLine("no share values", line_no)
    if len(hex_text) % digits:
        raise MalformedLine(
            f"hex data {hex_text!r} is not a multiple of field width", line_no)
    if w == 4 and len(hex_text) % 2:
        raise MalformedLine(
            f"hex data {hex_text!r} missing final (padding) nibble", line_no)

    try:
        value = binascii.unhexlify(hex_text)
    except ValueError:
        raise InvalidHex(f"invalid hex data {hex_text!r}", line_no) from None

    return ShareRecord(quorum=k, width=w, index=s, value=value)


def format_line(record: ShareRecord) -> str:
    """Render a record as a share line (no newline)."""
    return (f"{record.quorum}={record.width}={record.index}="
            f"{binascii.hexlify(record.value).decode('ascii')}=")
