import zlib
from pathlib import Path


def read_rom_bytes(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def write_rom_bytes(path: str | Path, data: bytes) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_bytes(data)


def crc32(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF


def parse_crc32(text: str | int) -> int:
    """Accept 0x-prefixed hex, bare hex ("1A2B3C4D") or an int."""
    if isinstance(text, int):
        value = text
    elif not isinstance(text, str):
        raise ValueError(f"Invalid CRC32 {text!r}, expected hex like 0x1A2B3C4D")
    else:
        s = text.strip()
        try:
            value = int(s, 16)
        except ValueError:
            raise ValueError(f"Invalid CRC32 '{text}', expected hex like 0x1A2B3C4D") from None
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"CRC32 0x{value:X} does not fit in 32 bits")
    return value
