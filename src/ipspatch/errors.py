"""Exceptions raised while validating, decoding and applying IPS patches."""


class PatchError(ValueError):
    """Base class for malformed patches and patches that do not fit the image.

    `position` is the best-effort byte offset of the problem: inside the patch
    for framing and decoding errors, inside the target image for application
    errors. It is None when no single position applies.
    """

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.position = position


class PatchTooSmallError(PatchError):
    pass


class BadHeaderError(PatchError):
    pass


class BadTrailerError(PatchError):
    pass


class TruncatedRecordError(PatchError):
    """A record field or payload runs into the trailer or past the end of the patch."""

    def __init__(self, message: str, position: int, record_index: int):
        super().__init__(message, position)
        self.record_index = record_index


class RecordOutOfBoundsError(PatchError):
    """A record writes past the end of the (possibly grown) target image."""

    def __init__(self, record_index: int, offset: int, end: int, image_size: int):
        super().__init__(
            f"Record #{record_index} writes 0x{offset:06X}-0x{end:06X} "
            f"but the image is only {image_size} bytes",
            offset,
        )
        self.record_index = record_index
        self.end = end
        self.image_size = image_size
