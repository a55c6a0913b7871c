"""
Utilities for building (valid and deliberately invalid) WAVE, PNG and DDS
files for use in tests.
"""

import struct

import zlib

from media_decoders.tables import PNG_SIGNATURE


################################################################################
# WAVE
################################################################################


def riff_chunk(chunk_type, data):
    return chunk_type + struct.pack("<I", len(data)) + data


def wave_format_chunk(
    channels=1,
    sample_rate=8000,
    bits_per_sample=8,
    compression_code=1,
    byte_rate=None,
    block_align=None,
    extension=b"",
):
    """
    Build a 'fmt ' chunk. The byte rate and block alignment are computed
    correctly unless given explicitly.
    """
    if block_align is None:
        block_align = (bits_per_sample // 8) * channels
    if byte_rate is None:
        byte_rate = block_align * sample_rate
    return riff_chunk(
        b"fmt ",
        struct.pack(
            "<HHIIHH",
            compression_code,
            channels,
            sample_rate,
            byte_rate,
            block_align,
            bits_per_sample,
        )
        + extension,
    )


def make_wave(*chunks):
    """Wrap the given chunks in a RIFF/WAVE container."""
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


def make_simple_wave(samples, **format_kwargs):
    """A WAVE file with one format chunk and one data chunk."""
    return make_wave(wave_format_chunk(**format_kwargs), riff_chunk(b"data", samples))


################################################################################
# PNG
################################################################################


def png_chunk(chunk_type, data):
    return (
        struct.pack(">I", len(data))
        + chunk_type
        + data
        + struct.pack(">I", zlib.crc32(chunk_type + data) & 0xFFFFFFFF)
    )


def image_header_chunk(
    width,
    height,
    bit_depth=8,
    color_type=2,
    compression_method=0,
    filter_method=0,
    interlace_method=0,
):
    return png_chunk(
        b"IHDR",
        struct.pack(
            ">iiBBBBB",
            width,
            height,
            bit_depth,
            color_type,
            compression_method,
            filter_method,
            interlace_method,
        ),
    )


def paeth(left, above, upper_left):
    p = left + above - upper_left
    distances = [abs(p - left), abs(p - above), abs(p - upper_left)]
    return [left, above, upper_left][distances.index(min(distances))]


def filter_scanline(filter_type, line, prior, bpp):
    """Apply a PNG filter to a scanline, returning the filtered bytes."""
    out = bytearray(len(line))
    for i in range(len(line)):
        left = line[i - bpp] if i >= bpp else 0
        above = prior[i]
        upper_left = prior[i - bpp] if i >= bpp else 0
        if filter_type == 0:
            prediction = 0
        elif filter_type == 1:
            prediction = left
        elif filter_type == 2:
            prediction = above
        elif filter_type == 3:
            prediction = (left + above) // 2
        elif filter_type == 4:
            prediction = paeth(left, above, upper_left)
        out[i] = (line[i] - prediction) & 0xFF
    return bytes(out)


def encode_scanlines(rows, bpp, filter_types=0):
    """
    Filter and compress a list of raw scanlines (bytes). 'filter_types' may
    be a single filter type or one per row.
    """
    if isinstance(filter_types, int):
        filter_types = [filter_types] * len(rows)

    raw = bytearray()
    prior = bytes(len(rows[0])) if rows else b""
    for row, filter_type in zip(rows, filter_types):
        raw.append(filter_type)
        raw += filter_scanline(filter_type, row, prior, bpp)
        prior = row
    return zlib.compress(bytes(raw))


def make_png(*chunks):
    return PNG_SIGNATURE + b"".join(chunks)


def make_simple_png(
    rows,
    width,
    height,
    bit_depth=8,
    color_type=2,
    bpp=1,
    filter_types=0,
    palette=None,
    transparency=None,
):
    """
    A complete PNG with an IHDR, optional PLTE and tRNS, a single IDAT and an
    IEND chunk.
    """
    chunks = [image_header_chunk(width, height, bit_depth, color_type)]
    if palette is not None:
        chunks.append(png_chunk(b"PLTE", palette))
    if transparency is not None:
        chunks.append(png_chunk(b"tRNS", transparency))
    chunks.append(png_chunk(b"IDAT", encode_scanlines(rows, bpp, filter_types)))
    chunks.append(png_chunk(b"IEND", b""))
    return make_png(*chunks)


################################################################################
# DDS
################################################################################

DDSD_CAPS_HEIGHT_WIDTH_PIXELFORMAT = 0x1007
DDSD_MIPMAPCOUNT = 0x20000
DDSD_DEPTH = 0x800000

DDPF_ALPHAPIXELS = 0x1
DDPF_FOURCC = 0x4
DDPF_RGB = 0x40

DDSCAPS_TEXTURE = 0x1000
DDSCAPS2_CUBEMAP = 0x200
DDSCAPS2_VOLUME = 0x200000

RGBA_MASKS = (0x000000FF, 0x0000FF00, 0x00FF0000, 0xFF000000)


def make_dds_header(
    width,
    height,
    flags=DDSD_CAPS_HEIGHT_WIDTH_PIXELFORMAT,
    depth=0,
    mipmap_count=0,
    pixel_format_flags=DDPF_RGB | DDPF_ALPHAPIXELS,
    fourcc=b"\x00\x00\x00\x00",
    rgb_bit_count=32,
    masks=RGBA_MASKS,
    caps=DDSCAPS_TEXTURE,
    caps2=0,
    header_size=124,
    pixel_format_size=32,
    magic=b"DDS ",
):
    """Build a DDS magic number and header (without any pixel data)."""
    return (
        struct.pack(
            "<4sIIiiIII",
            magic,
            header_size,
            flags,
            height,
            width,
            0,
            depth,
            mipmap_count,
        )
        + bytes(4 * 11)
        + struct.pack(
            "<II4sIIIII",
            pixel_format_size,
            pixel_format_flags,
            fourcc,
            rgb_bit_count,
            *masks
        )
        + struct.pack("<IIIII", caps, caps2, 0, 0, 0)
    )


################################################################################
# Sample assets
################################################################################

SAMPLE_PCM = bytes(range(16))
"""16 bytes of 8 bit mono PCM."""

SAMPLE_PNG_ROWS = [b"\x01\x02\x03\x04\x05\x06", b"\x07\x08\x09\x0A\x0B\x0C"]
"""Two rows of a 2x2 8 bit truecolor image."""

SAMPLE_DDS_PIXELS = bytes(range(4 * 4 * 4))
"""A 4x4 RGBA image."""
