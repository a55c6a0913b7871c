"""
The :py:mod:`media_decoders.decoder.dds` module decodes DirectDraw Surface
(DDS) textures holding either uncompressed 8-bit RGB(A) pixels or S3TC
(DXT1/DXT3/DXT5) compressed blocks.

A DDS file consists of a magic number, a fixed 124 byte header (which embeds
a 32 byte pixel format description) and the pixel data for each mip level,
largest first. All integers are little-endian. Pixel data is returned
verbatim: compressed blocks are not decompressed.

.. autofunction:: decode_dds

.. autofunction:: read_dds_header

.. autofunction:: dds_image_format

.. autofunction:: classify_dds_dimensions

.. autofunction:: read_dds_images

.. autoclass:: DdsHeader

.. autoclass:: DdsPixelFormat
"""

import logging

from media_decoders.fixeddict import fixeddict, Entry

from media_decoders.string_formatters import Hex, FourCC, Flags

from media_decoders.tables import (
    DDS_MAGIC,
    DDS_HEADER_BYTES,
    DDS_PIXEL_FORMAT_BYTES,
    DDS_RESERVED_FIELDS,
    DDS_HEIGHT_1D,
    DdsHeaderFlags,
    DdsPixelFormatFlags,
    DdsCaps,
    DdsCaps2,
    ImageFormats,
    TextureDimensions,
)

from media_decoders.assets import DecodedImage, image_byte_length

from media_decoders.decoder.io import (
    State,
    init_io,
    read_bytes,
    read_uint_le,
    read_sint_le,
    skip_bytes,
)

from media_decoders.decoder.exceptions import (
    BadMagic,
    BadHeaderSize,
    UnsupportedPixelMasks,
    UnsupportedFourCC,
    UnsupportedCubeMap,
)

__all__ = [
    "DdsHeader",
    "DdsPixelFormat",
    "decode_dds",
    "read_dds",
    "read_dds_header",
    "dds_image_format",
    "classify_dds_dimensions",
    "read_dds_images",
]


DdsPixelFormat = fixeddict(
    "DdsPixelFormat",
    Entry("size"),
    Entry("flags", formatter=Flags(DdsPixelFormatFlags)),
    Entry(
        "fourcc",
        formatter=FourCC(),
        help="Only meaningful when the 'fourcc' flag is set.",
    ),
    Entry("rgb_bit_count"),
    Entry("r_mask", formatter=Hex(8)),
    Entry("g_mask", formatter=Hex(8)),
    Entry("b_mask", formatter=Hex(8)),
    Entry("a_mask", formatter=Hex(8)),
)

DdsHeader = fixeddict(
    "DdsHeader",
    Entry("size"),
    Entry("flags", formatter=Flags(DdsHeaderFlags)),
    Entry("height", help="-1 for one dimensional textures."),
    Entry("width", help="Floored to 1."),
    Entry("pitch_or_linear_size"),
    Entry("depth", help="Floored to 1."),
    Entry("mipmap_count", help="Floored to 1."),
    Entry("pixel_format", formatter=lambda pf: str(pf).replace("\n", "\n  ")),
    Entry("caps", formatter=Flags(DdsCaps)),
    Entry("caps2", formatter=Flags(DdsCaps2)),
    Entry("caps3", formatter=Hex(8)),
    Entry("caps4", formatter=Hex(8)),
)

RGB_MASKS = (0x000000FF, 0x0000FF00, 0x00FF0000)
ALPHA_MASK = 0xFF000000

DXT1 = b"DXT1"

FOURCC_IMAGE_FORMATS = {
    b"DXT3": ImageFormats.rgba_dxt3,
    b"DXT5": ImageFormats.rgba_dxt5,
}
"""Lookup from FourCC to image format (DXT1 depends on the alpha flag)."""


def read_pixel_format(state):
    pixel_format = DdsPixelFormat()
    pixel_format["size"] = read_uint_le(state, 4)
    if pixel_format["size"] != DDS_PIXEL_FORMAT_BYTES:
        raise BadHeaderSize(
            "DDS pixel format", pixel_format["size"], DDS_PIXEL_FORMAT_BYTES
        )
    pixel_format["flags"] = read_uint_le(state, 4)
    pixel_format["fourcc"] = read_bytes(state, 4)
    pixel_format["rgb_bit_count"] = read_uint_le(state, 4)
    pixel_format["r_mask"] = read_uint_le(state, 4)
    pixel_format["g_mask"] = read_uint_le(state, 4)
    pixel_format["b_mask"] = read_uint_le(state, 4)
    pixel_format["a_mask"] = read_uint_le(state, 4)
    return pixel_format


def read_dds_header(state):
    """
    Read and check the DDS magic number and header, returning a
    :py:class:`DdsHeader` (also stored in state["header"]).
    """
    magic = read_bytes(state, 4)
    if magic != DDS_MAGIC:
        raise BadMagic("DDS magic number", magic, DDS_MAGIC)

    header = state["header"] = DdsHeader()
    header["size"] = read_uint_le(state, 4)
    if header["size"] != DDS_HEADER_BYTES:
        raise BadHeaderSize("DDS header", header["size"], DDS_HEADER_BYTES)

    header["flags"] = read_uint_le(state, 4)
    header["height"] = read_sint_le(state, 4)
    header["width"] = max(1, read_sint_le(state, 4))
    header["pitch_or_linear_size"] = read_uint_le(state, 4)
    header["depth"] = max(1, read_uint_le(state, 4))
    header["mipmap_count"] = max(1, read_uint_le(state, 4))
    skip_bytes(state, 4 * DDS_RESERVED_FIELDS)
    header["pixel_format"] = read_pixel_format(state)
    header["caps"] = read_uint_le(state, 4)
    header["caps2"] = read_uint_le(state, 4)
    header["caps3"] = read_uint_le(state, 4)
    header["caps4"] = read_uint_le(state, 4)
    # Reserved
    skip_bytes(state, 4)

    logging.debug("decode_dds: %s", header)

    return header


def dds_image_format(header):
    """
    Determine the :py:class:`~media_decoders.tables.ImageFormats` of the
    pixel data described by a :py:class:`DdsHeader`.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.UnsupportedPixelMasks`
    :py:exc:`~media_decoders.decoder.exceptions.UnsupportedFourCC`
    """
    pixel_format = header["pixel_format"]
    flags = pixel_format["flags"]
    has_alpha = bool(flags & DdsPixelFormatFlags.alpha_pixels)

    if flags & DdsPixelFormatFlags.fourcc:
        fourcc = pixel_format["fourcc"]
        if fourcc == DXT1:
            return ImageFormats.rgba_dxt1 if has_alpha else ImageFormats.rgb_dxt1
        elif fourcc in FOURCC_IMAGE_FORMATS:
            return FOURCC_IMAGE_FORMATS[fourcc]
        else:
            raise UnsupportedFourCC(fourcc)

    masks = (pixel_format["r_mask"], pixel_format["g_mask"], pixel_format["b_mask"])
    if masks == RGB_MASKS:
        if not has_alpha:
            return ImageFormats.rgb
        elif pixel_format["a_mask"] == ALPHA_MASK:
            return ImageFormats.rgba

    raise UnsupportedPixelMasks(flags, *(masks + (pixel_format["a_mask"],)))


def classify_dds_dimensions(header):
    """
    Determine whether a :py:class:`DdsHeader` describes a 1D, 2D or 3D
    texture, returning a :py:class:`~media_decoders.tables.TextureDimensions`.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.UnsupportedCubeMap`
    """
    if header["height"] == DDS_HEIGHT_1D:
        return TextureDimensions.texture_1d
    elif header["caps2"] & DdsCaps2.volume and header["flags"] & DdsHeaderFlags.depth:
        return TextureDimensions.texture_3d
    elif header["caps2"] & DdsCaps2.cubemap:
        raise UnsupportedCubeMap()
    else:
        return TextureDimensions.texture_2d


def read_dds_images(state, header, image_format):
    """
    Read the pixel data of every mip level described by 'header', returning
    a list of :py:class:`~media_decoders.assets.DecodedImage`, largest
    first. Each level halves the previous level's dimensions (but never
    below 1).
    """
    if header["flags"] & DdsHeaderFlags.mipmap_count:
        levels = header["mipmap_count"]
    else:
        levels = 1

    width = header["width"]
    height = max(1, header["height"])
    depth = header["depth"]

    images = []
    for level in range(levels):
        length = image_byte_length(image_format, width, height, depth)
        logging.debug(
            "decode_dds: mip level %d: %d x %d x %d (%d bytes)",
            level,
            width,
            height,
            depth,
            length,
        )
        images.append(
            DecodedImage(
                format=image_format,
                width=width,
                height=height,
                depth=depth,
                level=level,
                data=read_bytes(state, length),
            )
        )
        width = max(1, width // 2)
        height = max(1, height // 2)
        depth = max(1, depth // 2)

    return images


def read_dds(state):
    """
    Decode a DDS texture from the stream in an initialised
    :py:class:`~media_decoders.decoder.io.State`.
    """
    header = read_dds_header(state)
    image_format = dds_image_format(header)
    return read_dds_images(state, header, image_format)


def decode_dds(f, descriptor=None):
    """
    Decode a DDS file.

    Parameters
    ==========
    f : file-like object
        A binary file positioned at the start of the DDS file.
    descriptor
        Unused. Accepted so that all decoders share the same signature.

    Returns
    =======
    images : [:py:class:`~media_decoders.assets.DecodedImage`, ...]
        One image per mip level, largest first.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.DecodeError`
    """
    state = State()
    init_io(state, f)
    return read_dds(state)
