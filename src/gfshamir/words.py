"""Layout of field words inside share value bytes.

Widths 8, 16 and 32 store each word in width // 8 big-endian bytes.
Width 4 packs two words per byte, earlier word in the high nibble, with
a zero padding nibble after an odd final word.
"""

from gfshamir.errors import UnsupportedFieldWidth

# Hex digits needed per word, by width.
HEX_DIGITS_PER_WORD = {4: 1, 8: 2, 16: 4, 32: 8}


def hex_digits_per_word(width: int) -> int:
    try:
        return HEX_DIGITS_PER_WORD[width]
    except KeyError:
        raise UnsupportedFieldWidth(f"Unsupported field width {width}") from None


def word_count(width: int, n_bytes: int) -> int:
    """Number of words (padding nibble included) in n_bytes of value data."""
    return n_bytes * 8 // width


def word_offset(width: int, i: int) -> tuple:
    """Byte range (start, stop) holding word i.

    For width 4 the range is the single byte shared with the neighbouring
    word; read_word picks the nibble.
    """
    if width == 4:
        return i // 2, i // 2 + 1
    size = hex_digits_per_word(width) // 2
    return i * size, (i + 1) * size


def read_word(width: int, data, i: int, base: int = 0) -> int:
    """Field element i of the value bytes starting at data[base]."""
    start, stop = word_offset(width, i)
    if width == 4:
        byte = data[base + start]
        return byte & 0x0f if i & 1 else byte >> 4
    return int.from_bytes(data[base + start:base + stop], 'big')


def unpack_words(width: int, data: bytes) -> list:
    return [read_word(width, data, i) for i in range(word_count(width, len(data)))]


def pack_words(width: int, words: list) -> bytes:
    """Serialize words to bytes, padding an odd nibble count with zero."""
    if width == 4:
        nibbles = list(words)
        if len(nibbles) % 2:
            nibbles.append(0)
        return bytes((hi << 4) | lo for hi, lo in zip(nibbles[0::2], nibbles[1::2]))
    size = hex_digits_per_word(width) // 2
    return b''.join(w.to_bytes(size, 'big') for w in words)
