"""Tests for container validation and record decoding."""

import pytest

from ipspatch import ips
from ipspatch.errors import (
    BadHeaderError,
    BadTrailerError,
    PatchError,
    PatchTooSmallError,
    TruncatedRecordError,
)
from ipspatch.patch_builder import encode_records, literal, rle


@pytest.mark.parametrize("patch", [b"", b"PATCH", b"PATCHEO", b"PAT"])
def test_validate_too_small(patch):
    with pytest.raises(PatchTooSmallError):
        ips.validate(patch)


def test_validate_bad_header():
    with pytest.raises(BadHeaderError):
        ips.validate(b"PATCX\x00\x00\x00EOF")


def test_validate_bad_trailer():
    with pytest.raises(BadTrailerError) as exc:
        ips.validate(b"PATCH\x00\x00\x00EOX")
    assert exc.value.position == 8


def test_validate_header_checked_before_trailer():
    with pytest.raises(BadHeaderError):
        ips.validate(b"XXXXXXXX")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        ips.validate(b"nope")
    assert issubclass(TruncatedRecordError, PatchError)


def test_empty_patch_is_valid():
    ips.validate(b"PATCHEOF")
    assert ips.decode_all(b"PATCHEOF") == []


def test_decode_literal_record():
    patch = b"PATCH" + b"\x01\x02\x03" + b"\x00\x02" + b"\xDE\xAD" + b"EOF"
    records = ips.decode_all(patch)
    assert records == [ips.LiteralRecord(0x010203, b"\xDE\xAD")]
    assert records[0].size == 2
    assert records[0].end == 0x010205


def test_decode_rle_record():
    patch = b"PATCH" + b"\x00\x00\x10" + b"\x00\x00" + b"\x01\x00" + b"\x7F" + b"EOF"
    assert ips.decode_all(patch) == [ips.RleRecord(0x10, 0x100, 0x7F)]


def test_zero_size_never_yields_empty_literal():
    patch = b"PATCH" + b"\x00\x00\x00" + b"\x00\x00" + b"\x00\x00" + b"\x00" + b"EOF"
    (record,) = ips.decode_all(patch)
    assert isinstance(record, ips.RleRecord)
    assert record.length == 0


def test_records_keep_file_order():
    records = [literal(10, b"\xAA"), rle(0, 3, 1), literal(10, b"\xBB")]
    assert ips.decode_all(encode_records(records)) == records


def test_round_trip_mixed_records():
    records = [
        literal(0, b"\x01"),
        rle(0xFFFFFF, 0xFFFF, 0x00),
        literal(0x123456, bytes(range(256))),
        rle(5, 1, 0xEE),
    ]
    assert ips.decode_all(encode_records(records)) == records


def test_offset_equal_to_eof_magic_is_a_record():
    # 0x454F46 spells "EOF" but more bytes follow, so it is an offset
    patch = b"PATCH" + b"EOF" + b"\x00\x01" + b"\x99" + b"EOF"
    assert ips.decode_all(patch) == [ips.LiteralRecord(0x454F46, b"\x99")]


def test_iter_records_is_lazy():
    patch = encode_records([literal(0, b"\x01")])[:-3] + b"\x00\x00\x01\x00\x09EOF"
    it = ips.iter_records(patch)
    assert next(it) == ips.LiteralRecord(0, b"\x01")
    with pytest.raises(TruncatedRecordError):
        next(it)


def test_size_past_trailer_is_truncated():
    patch = b"PATCH" + b"\x00\x00\x00" + b"\x00\x05" + b"\x01\x02" + b"EOF"
    with pytest.raises(TruncatedRecordError) as exc:
        ips.decode_all(patch)
    assert exc.value.record_index == 0
    assert exc.value.position == 10


def test_truncated_rle_fields():
    patch = b"PATCH" + b"\x00\x00\x00" + b"\x00\x00" + b"\x00\x04" + b"EOF"
    with pytest.raises(TruncatedRecordError):
        ips.decode_all(patch)


def test_truncated_size_field():
    patch = b"PATCH" + b"\x00\x00\x00" + b"\x00" + b"EOF"
    with pytest.raises(TruncatedRecordError):
        ips.decode_all(patch)


def test_truncation_reports_record_index():
    body = encode_records([literal(0, b"\x01"), rle(4, 2, 9)])[5:-3]
    patch = b"PATCH" + body + b"\x00\x00\x08\x00\x03\x01" + b"EOF"
    with pytest.raises(TruncatedRecordError) as exc:
        ips.decode_all(patch)
    assert exc.value.record_index == 2


def test_stray_bytes_before_trailer_are_ignored(caplog):
    patch = encode_records([literal(1, b"\x02")])[:-3] + b"\x00\x00" + b"EOF"
    with caplog.at_level("WARNING", logger="ipspatch.ips"):
        assert ips.decode_all(patch) == [ips.LiteralRecord(1, b"\x02")]
    assert "stray" in caplog.text


def test_decode_accepts_bytearray():
    patch = bytearray(encode_records([rle(3, 2, 0x11)]))
    assert ips.decode_all(patch) == [ips.RleRecord(3, 2, 0x11)]
