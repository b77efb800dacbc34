import logging

import click

from . import config, ips, patcher, rom_utils
from .errors import PatchError


@click.group()
@click.version_option("0.1.0", prog_name="ipspatch")
@click.option("-v", "--verbose", is_flag=True, help="Log decoding and growth details")
def main(verbose):
    """IPS patching tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("-r", "--rom", type=click.Path(exists=True, dir_okay=False), required=True, help="Path to original ROM")
@click.option("-p", "--patch", type=click.Path(exists=True, dir_okay=False), required=True, help="Path to IPS patch")
@click.option("-o", "--output", type=click.Path(dir_okay=False), required=True, help="Where to write the patched ROM")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML settings file")
@click.option("--sizing", type=click.Choice(patcher.SIZING_POLICIES), default=None, help="Grow to the last record's reach (default) or the furthest record's")
@click.option("--expected-crc32", type=str, default=None, help="Refuse to patch unless the ROM has this CRC32 (hex)")
def apply(rom, patch, output, config_path, sizing, expected_crc32):
    """Apply PATCH to ROM and write the result to OUTPUT."""
    try:
        cfg = config.load_config(config_path) if config_path else config.PatcherConfig()
        cfg = cfg.merged(sizing=sizing, expected_crc32=expected_crc32)
    except (config.ConfigError, OSError) as e:
        raise click.ClickException(f"Bad config: {e}")

    data = rom_utils.read_rom_bytes(rom)
    patch_bytes = rom_utils.read_rom_bytes(patch)

    if cfg.expected_crc32 is not None:
        actual = rom_utils.crc32(data)
        if actual != cfg.expected_crc32:
            raise click.ClickException(
                f"ROM CRC32 is {actual:08X}, expected {cfg.expected_crc32:08X}; refusing to patch"
            )

    try:
        patched = patcher.apply_patch(data, patch_bytes, sizing=cfg.sizing)
    except PatchError as e:
        raise click.ClickException(f"Invalid patch {patch}: {e}")

    try:
        rom_utils.write_rom_bytes(output, patched)
    except OSError as e:
        raise click.ClickException(f"Failed to write {output}: {e}")
    click.echo(f"Wrote patched ROM → {output}")
    click.echo(f"Size: {len(data)} → {len(patched)} bytes")
    click.echo(f"CRC32: {rom_utils.crc32(patched):08X}")


@main.command()
@click.option("-p", "--patch", type=click.Path(exists=True, dir_okay=False), required=True, help="Path to IPS patch")
@click.option("--limit", type=click.IntRange(min=0), default=20, help="Maximum number of records to list")
def info(patch, limit):
    """Validate PATCH and list its records."""
    patch_bytes = rom_utils.read_rom_bytes(patch)
    try:
        records = ips.decode_all(patch_bytes)
    except PatchError as e:
        raise click.ClickException(f"Invalid patch {patch}: {e}")

    click.echo(f"Patch: {len(patch_bytes)} bytes, {len(records)} record(s)")
    for i, r in enumerate(records[:limit]):
        if isinstance(r, ips.RleRecord):
            click.echo(f"  #{i:<4} RLE     @0x{r.offset:06X} len={r.length} value=0x{r.value:02X}")
        else:
            click.echo(f"  #{i:<4} literal @0x{r.offset:06X} size={r.size}")
    if len(records) > limit:
        click.echo(f"  ... {len(records) - limit} more")
    if records:
        last = patcher.required_length(records)
        furthest = patcher.max_reach(records)
        click.echo(f"Last record reaches 0x{last:06X}")
        if furthest > last:
            click.echo(f"Warning: an earlier record reaches 0x{furthest:06X}; use --sizing max to grow that far")


if __name__ == "__main__":
    main()
