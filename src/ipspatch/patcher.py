"""Applies decoded IPS records onto a copy of the source image."""
import logging
from typing import Sequence

from .errors import RecordOutOfBoundsError
from .ips import LiteralRecord, Record, decode_all

logger = logging.getLogger(__name__)

SIZING_POLICIES = ("last", "max")


def required_length(records: Sequence[Record]) -> int:
    """Image length needed by the LAST record in file order.

    Earlier records that reach further do not count; apply_records rejects
    them if they end up past the grown image.
    """
    if not records:
        raise ValueError("required_length needs at least one record")
    return records[-1].end


def max_reach(records: Sequence[Record]) -> int:
    if not records:
        raise ValueError("max_reach needs at least one record")
    return max(r.end for r in records)


def ensure_capacity(image: bytearray, length: int) -> int:
    """Zero-extend `image` to `length` bytes. Never shrinks. Returns bytes added."""
    missing = length - len(image)
    if missing <= 0:
        return 0
    image.extend(bytes(missing))
    logger.debug("grew image by %d bytes to %d", missing, len(image))
    return missing


def apply_records(image: bytearray, records: Sequence[Record]) -> None:
    """Write every record into `image` in file order; later records win on overlap."""
    for index, record in enumerate(records):
        # Zero-length RLE writes nothing, wherever it points
        if record.size == 0:
            continue
        if record.end > len(image):
            raise RecordOutOfBoundsError(index, record.offset, record.end, len(image))
        if isinstance(record, LiteralRecord):
            image[record.offset:record.end] = record.data
        else:
            image[record.offset:record.end] = bytes([record.value]) * record.length


def apply_patch(source_image: bytes, patch: bytes, sizing: str = "last") -> bytes:
    """Validate and decode `patch`, apply it to a copy of `source_image` and return the result.

    Raises a PatchError subclass on any malformed patch or out-of-bounds write;
    nothing partial is ever returned.
    """
    if sizing not in SIZING_POLICIES:
        raise ValueError(f"Unknown sizing policy {sizing!r}, expected one of {SIZING_POLICIES}")
    records = decode_all(patch)
    image = bytearray(source_image)
    if not records:
        logger.info("patch has no records; image unchanged")
        return bytes(image)
    target = required_length(records) if sizing == "last" else max_reach(records)
    ensure_capacity(image, target)
    apply_records(image, records)
    logger.info("applied %d record(s); image is %d bytes", len(records), len(image))
    return bytes(image)
