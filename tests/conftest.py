"""Shared fixtures: small ROMs and patches written to tmp_path."""

import pytest

from ipspatch.patch_builder import encode_records, literal, rle


@pytest.fixture
def rom_file(tmp_path):
    path = tmp_path / "game.gb"
    path.write_bytes(bytes(16))
    return path


@pytest.fixture
def patch_file(tmp_path):
    path = tmp_path / "fix.ips"
    path.write_bytes(encode_records([literal(2, b"\xAA\xBB"), rle(8, 4, 0xFF)]))
    return path
