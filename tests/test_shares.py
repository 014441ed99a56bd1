"""Tests for share line parsing."""

import pytest
from gfshamir.errors import (
    BadQuorum, BadShareIndex, InvalidHex, MalformedLine, ShareError,
    UnsupportedFieldWidth,
)
from gfshamir.shares import ShareRecord, format_line, max_index, parse_line


class TestParse:

    def test_basic(self):
        record = parse_line('2=8=1=40=\n')
        assert record == ShareRecord(quorum=2, width=8, index=1, value=b'\x40')
        assert record.word_count == 1

    def test_wide_values(self):
        record = parse_line('3=16=7=0102a0b0=')
        assert record.value == bytes.fromhex('0102a0b0')
        assert record.word_count == 2

    def test_nibble_values(self):
        record = parse_line('2=4=3=abc0=')
        assert record.word_count == 4

    def test_uppercase_hex_accepted(self):
        assert parse_line('1=8=1=AbCd=').value == b'\xab\xcd'

    def test_format_line(self):
        record = ShareRecord(quorum=3, width=8, index=200, value=b'\x00\xff')
        assert format_line(record) == '3=8=200=00ff='
        assert parse_line(format_line(record)) == record

    def test_max_index(self):
        assert max_index(4) == 8
        assert max_index(8) == 128
        assert max_index(32) == 1 << 31


class TestMalformed:

    @pytest.mark.parametrize('line', [
        '2=8=1=40',
        '2=8=1=40==',
        '',
        '2=8=40=',
    ])
    def test_wrong_field_count(self, line):
        with pytest.raises(MalformedLine):
            parse_line(line)

    @pytest.mark.parametrize('line', [
        'x=8=1=40=',
        '2=eight=1=40=',
        '2=8=-1=40=',
        '2=8= 1=40=',
        '2=8=1.0=40=',
    ])
    def test_non_integer(self, line):
        with pytest.raises(MalformedLine):
            parse_line(line)

    @pytest.mark.parametrize('line', [
        '9' * 5000 + '=8=1=40=',
        '2=' + '8' * 5000 + '=1=40=',
        '2=8=' + '1' * 5000 + '=40=',
    ])
    def test_oversized_integer(self, line):
        with pytest.raises(MalformedLine, match='too long') as info:
            parse_line(line, line_no=2)
        assert info.value.line_no == 2

    def test_long_but_legal_digits(self):
        assert parse_line('0' * 20 + '2=8=1=40=').quorum == 2
        with pytest.raises(BadQuorum):
            parse_line('9999999999=8=1=40=')

    def test_undecodable_bytes_in_integer(self):
        with pytest.raises(MalformedLine):
            parse_line('2\udcff=8=1=40=')

    def test_trailing_data(self):
        with pytest.raises(MalformedLine, match='after final'):
            parse_line('2=8=1=40=junk')

    def test_hex_not_multiple_of_width(self):
        with pytest.raises(MalformedLine, match='multiple of field width'):
            parse_line('2=16=1=010=')
        with pytest.raises(MalformedLine):
            parse_line('2=32=1=0102=')

    def test_missing_padding_nibble(self):
        with pytest.raises(MalformedLine, match='padding'):
            parse_line('2=4=1=abc=')

    def test_empty_values(self):
        with pytest.raises(MalformedLine):
            parse_line('2=8=1==')

    def test_line_number_reported(self):
        with pytest.raises(MalformedLine) as info:
            parse_line('2=8=1', line_no=7)
        assert info.value.line_no == 7
        assert str(info.value).startswith('line 7:')


class TestRanges:

    def test_unsupported_width(self):
        with pytest.raises(UnsupportedFieldWidth) as info:
            parse_line('2=12=1=40=', line_no=3)
        assert info.value.line_no == 3

    def test_bad_quorum(self):
        with pytest.raises(BadQuorum):
            parse_line('0=8=1=40=')
        with pytest.raises(BadQuorum):
            parse_line('129=8=1=40=')
        with pytest.raises(BadQuorum):
            parse_line('9=4=1=40=')

    def test_bad_share_index(self):
        with pytest.raises(BadShareIndex):
            parse_line('2=8=0=40=')
        with pytest.raises(BadShareIndex):
            parse_line('2=8=129=40=')

    def test_boundaries_accepted(self):
        assert parse_line('128=8=128=40=').index == 128
        assert parse_line('8=4=8=40=').quorum == 8


class TestInvalidHex:

    def test_non_hex(self):
        with pytest.raises(InvalidHex):
            parse_line('2=8=1=zz=')

    def test_non_ascii(self):
        with pytest.raises(InvalidHex):
            parse_line('2=8=1=4é=')

    def test_undecodable_bytes_in_values(self):
        with pytest.raises(InvalidHex):
            parse_line('2=8=1=4\udcff=')

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_line('2=8=1=zz=')
        assert issubclass(InvalidHex, ShareError)
