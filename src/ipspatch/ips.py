"""IPS container framing and record decoding.

Layout:
    "PATCH"                              5-byte header
    records...
        offset  3 bytes, big-endian
        size    2 bytes, big-endian
        size != 0: data[size]            literal record
        size == 0: length[2] value[1]    RLE record
    "EOF"                                3-byte trailer
"""
import logging
from typing import Iterator, NamedTuple, Union

from .errors import BadHeaderError, BadTrailerError, PatchTooSmallError, TruncatedRecordError

logger = logging.getLogger(__name__)

PATCH_HEADER = b"PATCH"
PATCH_FOOTER = b"EOF"
MIN_PATCH_SIZE = len(PATCH_HEADER) + len(PATCH_FOOTER)

OFFSET_WIDTH = 3
SIZE_WIDTH = 2
MAX_OFFSET = 0xFFFFFF
MAX_SIZE = 0xFFFF


class LiteralRecord(NamedTuple):
    offset: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.offset + len(self.data)


class RleRecord(NamedTuple):
    offset: int
    length: int
    value: int

    @property
    def size(self) -> int:
        return self.length

    @property
    def end(self) -> int:
        return self.offset + self.length


Record = Union[LiteralRecord, RleRecord]


def validate(patch: bytes) -> None:
    """Check the header and trailer framing; raise a PatchError subclass on failure."""
    if len(patch) < MIN_PATCH_SIZE:
        raise PatchTooSmallError(
            f"Patch is {len(patch)} bytes, smaller than the {MIN_PATCH_SIZE}-byte minimum", 0
        )
    if patch[: len(PATCH_HEADER)] != PATCH_HEADER:
        raise BadHeaderError(f"Patch header {bytes(patch[:5])!r} is not {PATCH_HEADER!r}", 0)
    if patch[-len(PATCH_FOOTER):] != PATCH_FOOTER:
        raise BadTrailerError(
            f"Patch trailer {bytes(patch[-3:])!r} is not {PATCH_FOOTER!r}", len(patch) - len(PATCH_FOOTER)
        )


class _Reader:
    """Cursor over the record body; never reads into the trailer."""

    def __init__(self, patch: bytes):
        self.data = patch
        self.pos = len(PATCH_HEADER)
        self.limit = len(patch) - len(PATCH_FOOTER)
        self.index = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.pos

    def take(self, count: int, what: str) -> bytes:
        if count > self.remaining:
            raise TruncatedRecordError(
                f"Record #{self.index}: {what} needs {count} bytes at 0x{self.pos:X} "
                f"but only {self.remaining} remain before the trailer",
                self.pos,
                self.index,
            )
        chunk = self.data[self.pos:self.pos + count]
        self.pos += count
        return bytes(chunk)

    def uint(self, width: int, what: str) -> int:
        return int.from_bytes(self.take(width, what), "big")


def iter_records(patch: bytes) -> Iterator[Record]:
    """Validate `patch` and lazily yield its records in file order."""
    validate(patch)
    reader = _Reader(patch)
    while reader.remaining >= OFFSET_WIDTH:
        offset = reader.uint(OFFSET_WIDTH, "offset")
        size = reader.uint(SIZE_WIDTH, "size")
        if size == 0:
            length = reader.uint(SIZE_WIDTH, "RLE length")
            value = reader.uint(1, "RLE value")
            record: Record = RleRecord(offset, length, value)
        else:
            record = LiteralRecord(offset, reader.take(size, "data"))
        logger.debug("record #%d: %s @0x%06X size=%d", reader.index, type(record).__name__, offset, record.size)
        yield record
        reader.index += 1
    if reader.remaining:
        logger.warning(
            "Ignoring %d stray byte(s) at 0x%X before the trailer", reader.remaining, reader.pos
        )


def decode_all(patch: bytes) -> list[Record]:
    return list(iter_records(patch))
