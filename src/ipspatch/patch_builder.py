from typing import Iterable

from .ips import MAX_OFFSET, MAX_SIZE, PATCH_FOOTER, PATCH_HEADER, LiteralRecord, Record, RleRecord


def encode_record(record: Record) -> bytes:
    if not 0 <= record.offset <= MAX_OFFSET:
        raise ValueError(f"Offset 0x{record.offset:X} does not fit in 3 bytes")
    head = record.offset.to_bytes(3, "big")
    if isinstance(record, RleRecord):
        if not 0 <= record.length <= MAX_SIZE:
            raise ValueError(f"RLE length {record.length} does not fit in 2 bytes")
        return head + b"\x00\x00" + record.length.to_bytes(2, "big") + bytes([record.value])
    size = len(record.data)
    # A zero size would be read back as an RLE record
    if not 1 <= size <= MAX_SIZE:
        raise ValueError(f"Literal record size {size} must be in 1..{MAX_SIZE}")
    return head + size.to_bytes(2, "big") + bytes(record.data)


def encode_records(records: Iterable[Record]) -> bytes:
    """Serialize records, in order, into a complete IPS container."""
    out = bytearray(PATCH_HEADER)
    for r in records:
        out.extend(encode_record(r))
    out.extend(PATCH_FOOTER)
    return bytes(out)


def literal(offset: int, data: bytes) -> LiteralRecord:
    return LiteralRecord(offset, bytes(data))


def rle(offset: int, length: int, value: int) -> RleRecord:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"RLE value {value} is not a byte")
    return RleRecord(offset, length, value)
