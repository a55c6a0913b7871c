"""
Magic numbers, field values and bit flags defined by the WAVE, PNG and DDS
file formats.
"""

from enum import IntEnum


__all__ = [
    "RIFF_MAGIC",
    "WAVE_MAGIC",
    "WAVE_FORMAT_CHUNK",
    "WAVE_DATA_CHUNK",
    "WAVE_FORMAT_CHUNK_BYTES",
    "WaveCompressionCodes",
    "PNG_SIGNATURE",
    "PNG_IMAGE_HEADER_BYTES",
    "PNG_HEIGHT_1D",
    "PngChunkTypes",
    "PngColorTypes",
    "PngFilterTypes",
    "DDS_MAGIC",
    "DDS_HEADER_BYTES",
    "DDS_PIXEL_FORMAT_BYTES",
    "DDS_RESERVED_FIELDS",
    "DDS_HEIGHT_1D",
    "DdsHeaderFlags",
    "DdsPixelFormatFlags",
    "DdsCaps",
    "DdsCaps2",
]


################################################################################
# RIFF/WAVE
################################################################################

RIFF_MAGIC = b"RIFF"
"""The first four bytes of any RIFF container."""

WAVE_MAGIC = b"WAVE"
"""The RIFF form type of a WAVE file (follows the container size)."""

WAVE_FORMAT_CHUNK = b"fmt "
WAVE_DATA_CHUNK = b"data"

WAVE_FORMAT_CHUNK_BYTES = 16
"""The number of bytes in a PCM 'fmt ' chunk (excluding any extension)."""


class WaveCompressionCodes(IntEnum):
    """'fmt ' chunk compression codes. Only PCM is decodable."""

    pcm = 0x0001
    adpcm = 0x0002
    ieee_float = 0x0003
    alaw = 0x0006
    mulaw = 0x0007
    extensible = 0xFFFE


################################################################################
# PNG
################################################################################

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
"""The eight byte signature which starts every PNG file."""

PNG_IMAGE_HEADER_BYTES = 13
"""The length of the data in an IHDR chunk."""

PNG_HEIGHT_1D = -1
"""An IHDR height value marking a one dimensional image."""


class PngChunkTypes(object):
    """Chunk type codes understood by the PNG decoder."""

    image_header = b"IHDR"
    palette = b"PLTE"
    transparency = b"tRNS"
    image_data = b"IDAT"
    image_end = b"IEND"


class PngColorTypes(IntEnum):
    """IHDR color type values."""

    greyscale = 0
    truecolor = 2
    indexed = 3
    greyscale_alpha = 4
    truecolor_alpha = 6


class PngFilterTypes(IntEnum):
    """Per-scanline filter type bytes."""

    none = 0
    sub = 1
    up = 2
    average = 3
    paeth = 4


################################################################################
# DDS
################################################################################

DDS_MAGIC = b"DDS "
"""The four byte magic number which starts every DDS file (note the space)."""

DDS_HEADER_BYTES = 124
"""The size of the DDS header following the magic number."""

DDS_PIXEL_FORMAT_BYTES = 32
"""The size of the pixel format structure embedded in the DDS header."""

DDS_RESERVED_FIELDS = 11
"""The number of reserved 32-bit fields preceding the pixel format."""

DDS_HEIGHT_1D = -1
"""A height value marking a one dimensional texture."""


class DdsHeaderFlags(IntEnum):
    """Bits of the DDS header 'flags' field (DDSD_*)."""

    caps = 0x00000001
    height = 0x00000002
    width = 0x00000004
    pitch = 0x00000008
    pixel_format = 0x00001000
    mipmap_count = 0x00020000
    linear_size = 0x00080000
    depth = 0x00800000


class DdsPixelFormatFlags(IntEnum):
    """Bits of the DDS pixel format 'flags' field (DDPF_*)."""

    alpha_pixels = 0x00000001
    alpha = 0x00000002
    fourcc = 0x00000004
    rgb = 0x00000040
    yuv = 0x00000200
    luminance = 0x00020000


class DdsCaps(IntEnum):
    """Bits of the DDS header 'caps' field (DDSCAPS_*)."""

    complex = 0x00000008
    texture = 0x00001000
    mipmap = 0x00400000


class DdsCaps2(IntEnum):
    """Bits of the DDS header 'caps2' field (DDSCAPS2_*)."""

    cubemap = 0x00000200
    cubemap_positive_x = 0x00000400
    cubemap_negative_x = 0x00000800
    cubemap_positive_y = 0x00001000
    cubemap_negative_y = 0x00002000
    cubemap_positive_z = 0x00004000
    cubemap_negative_z = 0x00008000
    volume = 0x00200000
