"""
The :py:mod:`media_decoders.decoder.png` module decodes non-interlaced PNG
images.

Decoding takes place in two phases. First the chunks of the file are read:
the image header (IHDR), palette (PLTE), transparency (tRNS) and image data
(IDAT) chunks are collected into a :py:class:`PngHeader` and all other chunks
are skipped. Chunk CRCs are not checked. Second, the concatenated image data
is decompressed one scanline at a time and each scanline is reconstructed
and expanded using the algorithms in :py:mod:`media_decoders.scanlines`.

.. autofunction:: decode_png

.. autofunction:: read_png

.. autofunction:: output_image_format

.. autoclass:: PngHeader

.. autoclass:: Inflater
    :members:
"""

import logging

import struct

import zlib

from media_decoders.fixeddict import fixeddict, Entry

from media_decoders.string_formatters import Bytes

from media_decoders.tables import (
    PNG_SIGNATURE,
    PNG_IMAGE_HEADER_BYTES,
    PNG_HEIGHT_1D,
    PngChunkTypes,
    PngColorTypes,
    PngFilterTypes,
    PNG_COLOR_TYPE_PARAMETERS,
    ImageFormats,
)

from media_decoders.scanlines import (
    filter_bytes_per_pixel,
    scanline_bytes,
    unfilter_scanline,
    build_palette,
    expand_scanline,
)

from media_decoders.assets import DecodedImage

from media_decoders.decoder.io import (
    State,
    init_io,
    read_bytes,
    read_bytes_or_eof,
    read_payload,
    skip_bytes,
    read_uint_be,
    read_sint_be,
)

from media_decoders.decoder.exceptions import (
    BadMagic,
    BadImageDimensions,
    MissingImageHeader,
    MissingPalette,
    BadImageHeaderLength,
    DuplicateImageHeader,
    DuplicatePalette,
    BadPaletteLength,
    TransparencyWithoutPalette,
    BadTransparencyLength,
    UnexpectedTransparency,
    BadFilterType,
    CorruptImageData,
    PaletteIndexOutOfRange,
    UnsupportedPngMethod,
    UnsupportedColorType,
    UnsupportedBitDepth,
    TruncatedImageData,
)

__all__ = [
    "PngHeader",
    "Inflater",
    "decode_png",
    "read_png",
    "output_image_format",
]


PngHeader = fixeddict(
    "PngHeader",
    Entry("width"),
    Entry("height"),
    Entry("bit_depth"),
    Entry("color_type", enum=PngColorTypes),
    Entry("compression_method"),
    Entry("filter_method"),
    Entry("interlace_method"),
    Entry("palette", formatter=Bytes(), help="The PLTE chunk contents, if any."),
    Entry(
        "transparency", formatter=Bytes(), help="The tRNS chunk contents, if any."
    ),
    help="""
        The image header (IHDR) fields of a PNG file along with the palette
        and transparency chunks which modify its interpretation.
    """,
)

PALETTE_ENTRY_BYTES = 3
MAX_PALETTE_ENTRIES = 256

TRANSPARENCY_BYTES = {
    PngColorTypes.greyscale: 2,
    PngColorTypes.truecolor: 6,
}
"""The required tRNS chunk length for non-indexed color types."""

UNPALETTED_IMAGE_FORMATS = {
    8: {
        1: ImageFormats.red,
        2: ImageFormats.rg,
        3: ImageFormats.rgb,
        4: ImageFormats.rgba,
    },
    16: {
        1: ImageFormats.red_16,
        2: ImageFormats.rg_16,
        3: ImageFormats.rgb_16,
        4: ImageFormats.rgba_16,
    },
}
"""
Lookup from component size (8 bit for sub-byte depths) and number of
components to output :py:class:`~media_decoders.tables.ImageFormats`.
"""


class Inflater(object):
    """
    Incrementally decompresses a zlib stream, returning exactly the number of
    bytes requested (where available). Intended for use as a context manager
    so the decompressor is released on all exit paths::

        >>> with Inflater(data) as inflater:
        ...     filter_type = inflater.read(1)

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.CorruptImageData`
        If the compressed data is invalid.
    """

    def __init__(self, data):
        self._decompressor = zlib.decompressobj()
        self._pending = data
        self._buffer = bytearray()

    def read(self, num_bytes):
        """
        Return the next 'num_bytes' decompressed bytes. Fewer bytes are
        returned if the compressed data runs out.
        """
        while len(self._buffer) < num_bytes and self._pending:
            try:
                self._buffer += self._decompressor.decompress(
                    self._pending, num_bytes - len(self._buffer)
                )
            except zlib.error as e:
                raise CorruptImageData(str(e))
            self._pending = self._decompressor.unconsumed_tail

        data = bytes(self._buffer[:num_bytes])
        del self._buffer[:num_bytes]
        return data

    def close(self):
        self._decompressor = None
        self._pending = b""
        self._buffer = bytearray()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def read_signature(state):
    signature = read_bytes(state, len(PNG_SIGNATURE))
    if signature != PNG_SIGNATURE:
        raise BadMagic("PNG signature", signature, PNG_SIGNATURE)


def read_image_header(state):
    """
    Read and validate the body of an IHDR chunk, setting state["header"].
    """
    header = state["header"] = PngHeader()
    header["width"] = read_sint_be(state, 4)
    header["height"] = read_sint_be(state, 4)
    header["bit_depth"] = read_uint_be(state, 1)
    header["color_type"] = read_uint_be(state, 1)
    header["compression_method"] = read_uint_be(state, 1)
    header["filter_method"] = read_uint_be(state, 1)
    header["interlace_method"] = read_uint_be(state, 1)

    for field in ("compression", "filter", "interlace"):
        value = header["{}_method".format(field)]
        if value != 0:
            raise UnsupportedPngMethod(field, value)

    if header["color_type"] not in PNG_COLOR_TYPE_PARAMETERS:
        raise UnsupportedColorType(header["color_type"])

    allowed_bit_depths = PNG_COLOR_TYPE_PARAMETERS[
        header["color_type"]
    ].allowed_bit_depths
    if header["bit_depth"] not in allowed_bit_depths:
        raise UnsupportedBitDepth(
            header["color_type"], header["bit_depth"], allowed_bit_depths
        )

    if header["width"] < 1 or (
        header["height"] < 1 and header["height"] != PNG_HEIGHT_1D
    ):
        raise BadImageDimensions(header["width"], header["height"])

    logging.debug("decode_png: %s", header)


def read_palette(state, length):
    if state["header"].get("palette") is not None:
        raise DuplicatePalette()
    if (
        length % PALETTE_ENTRY_BYTES != 0
        or not 1 <= length // PALETTE_ENTRY_BYTES <= MAX_PALETTE_ENTRIES
    ):
        raise BadPaletteLength(length)
    state["header"]["palette"] = read_bytes(state, length)


def read_transparency(state, length):
    header = state["header"]
    color_type = header["color_type"]

    if color_type == PngColorTypes.indexed:
        palette = header.get("palette")
        if palette is None:
            raise TransparencyWithoutPalette()
        entries = len(palette) // PALETTE_ENTRY_BYTES
        if length > entries:
            raise BadTransparencyLength(color_type, length, entries)
    elif color_type in TRANSPARENCY_BYTES:
        if length != TRANSPARENCY_BYTES[color_type]:
            raise BadTransparencyLength(
                color_type, length, TRANSPARENCY_BYTES[color_type]
            )
    else:
        raise UnexpectedTransparency(color_type)

    header["transparency"] = read_bytes(state, length)


def read_chunks(state):
    """
    Read all chunks up to the IEND chunk (or a clean end of stream at a chunk
    boundary), returning the concatenated IDAT chunk contents.
    """
    image_data = bytearray()

    while True:
        length_bytes = read_bytes_or_eof(state, 4)
        if length_bytes is None:
            break
        (length,) = struct.unpack(">I", length_bytes)
        chunk_type = read_bytes(state, 4)
        logging.debug("decode_png: chunk %r (%d bytes)", chunk_type, length)

        if state.get("header") is None and chunk_type != PngChunkTypes.image_header:
            raise MissingImageHeader(chunk_type)

        if chunk_type == PngChunkTypes.image_header:
            if state.get("header") is not None:
                raise DuplicateImageHeader()
            if length != PNG_IMAGE_HEADER_BYTES:
                raise BadImageHeaderLength(length, PNG_IMAGE_HEADER_BYTES)
            read_image_header(state)
        elif chunk_type == PngChunkTypes.palette:
            read_palette(state, length)
        elif chunk_type == PngChunkTypes.transparency:
            read_transparency(state, length)
        elif chunk_type == PngChunkTypes.image_data:
            image_data += read_payload(state, length)
        else:
            skip_bytes(state, length)

        # CRC
        skip_bytes(state, 4)

        if chunk_type == PngChunkTypes.image_end:
            break

    if state.get("header") is None:
        raise MissingImageHeader(None)

    return bytes(image_data)


def output_image_format(header):
    """
    Determine the :py:class:`~media_decoders.tables.ImageFormats` of the
    image produced for a given :py:class:`PngHeader`. Indexed images are
    always RGBA. Greyscale and truecolor images gain an alpha component when
    a tRNS chunk is present.
    """
    color_type = header["color_type"]
    if color_type == PngColorTypes.indexed:
        return ImageFormats.rgba

    components = PNG_COLOR_TYPE_PARAMETERS[color_type].channels
    if header.get("transparency") is not None:
        components += 1

    return UNPALETTED_IMAGE_FORMATS[16 if header["bit_depth"] == 16 else 8][
        components
    ]


def reconstruct_image(header, image_data):
    """
    Decompress, unfilter and expand every scanline of the image, returning
    the concatenated pixel data.
    """
    color_type = header["color_type"]
    bit_depth = header["bit_depth"]
    width = header["width"]
    rows = 1 if header["height"] == PNG_HEIGHT_1D else header["height"]

    channels = PNG_COLOR_TYPE_PARAMETERS[color_type].channels
    bpp = filter_bytes_per_pixel(channels, bit_depth)
    row_bytes = scanline_bytes(width, channels, bit_depth)

    palette = None
    transparency = header.get("transparency")
    if color_type == PngColorTypes.indexed:
        palette = build_palette(header["palette"], transparency)

    current = bytearray(row_bytes)
    prior = bytearray(row_bytes)
    out = bytearray()

    with Inflater(image_data) as inflater:
        for row in range(rows):
            filter_type = inflater.read(1)
            if len(filter_type) != 1:
                raise TruncatedImageData(row, 1, 0)
            filter_type = filter_type[0]

            scanline = inflater.read(row_bytes)
            if len(scanline) != row_bytes:
                raise TruncatedImageData(row, row_bytes, len(scanline))
            current[:] = scanline

            try:
                filter_type = PngFilterTypes(filter_type)
            except ValueError:
                raise BadFilterType(filter_type, row)
            unfilter_scanline(filter_type, current, prior, bpp)

            try:
                out += expand_scanline(
                    current,
                    color_type,
                    bit_depth,
                    width,
                    palette=palette,
                    transparency=transparency,
                )
            except IndexError as e:
                raise PaletteIndexOutOfRange(e.args[0], len(palette))

            current, prior = prior, current

    return bytes(out)


def read_png(state):
    """
    Decode a PNG image from the stream in an initialised
    :py:class:`~media_decoders.decoder.io.State`. On return state["header"]
    holds the :py:class:`PngHeader`.
    """
    read_signature(state)
    image_data = read_chunks(state)
    header = state["header"]

    if header["color_type"] == PngColorTypes.indexed and header.get("palette") is None:
        raise MissingPalette()

    image_format = output_image_format(header)
    data = reconstruct_image(header, image_data)

    return DecodedImage(
        format=image_format,
        width=header["width"],
        height=1 if header["height"] == PNG_HEIGHT_1D else header["height"],
        depth=1,
        level=0,
        data=data,
    )


def decode_png(f, descriptor=None):
    """
    Decode a PNG file.

    Parameters
    ==========
    f : file-like object
        A binary file positioned at the start of the PNG file.
    descriptor
        Unused. Accepted so that all decoders share the same signature.

    Returns
    =======
    image : :py:class:`~media_decoders.assets.DecodedImage`
        A one dimensional image (IHDR height of -1) is returned with a height
        of 1.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.DecodeError`
    """
    state = State()
    init_io(state, f)
    return read_png(state)
