"""
The :py:mod:`media_decoders.decoder.exceptions` module defines the exceptions
raised when a file cannot be decoded. All derive from :py:exc:`DecodeError`
via one of six category classes:

* :py:exc:`InvalidContainer` -- bad magic number or signature.
* :py:exc:`MalformedHeader` -- a header field, or a combination of fields,
  holds an impossible value.
* :py:exc:`MissingHeader` -- a payload was encountered before the header it
  depends on.
* :py:exc:`InvalidChunk` -- a chunk's contents are structurally invalid.
* :py:exc:`Unsupported` -- a valid file using a feature these decoders do
  not implement.
* :py:exc:`TruncatedStream` -- the file ended before a required read
  completed.

Every concrete exception records the offending (and, where relevant,
expected) values as attributes and provides a detailed human-readable
explanation via :py:meth:`DecodeError.explain`.

.. autoexception:: DecodeError
    :members:

"""

from media_decoders.string_utils import wrap_paragraphs

from media_decoders.string_formatters import FourCC, Hex

from media_decoders.tables import (
    PngColorTypes,
    WaveCompressionCodes,
    AUDIO_FORMATS_BY_LAYOUT,
)


def enum_to_string(enum_type, value):
    """
    Convert a value into a string such as "truecolor alpha (6)" if it is a
    member of 'enum_type' or just the number otherwise.
    """
    try:
        return "{} ({:d})".format(enum_type(value).name.replace("_", " "), value)
    except ValueError:
        return "{:d}".format(value)


class DecodeError(Exception):
    """
    Base class for all decoding failure exceptions.
    """

    def __str__(self):
        return wrap_paragraphs(self.explain()).partition("\n")[0]

    def explain(self):
        """
        Produce a detailed human readable explanation of the decoding
        failure.

        Should return a string which can be re-linewrapped by
        :py:func:`media_decoders.string_utils.wrap_paragraphs`. The first
        paragraph is a one-sentence summary, used by :py:func:`str`.
        """
        raise NotImplementedError()


class InvalidContainer(DecodeError):
    """The file does not start with the expected magic number or signature."""


class MalformedHeader(DecodeError):
    """A header contains an invalid value or inconsistent values."""


class MissingHeader(DecodeError):
    """A required header was not found before the data which depends on it."""


class InvalidChunk(DecodeError):
    """A chunk (or its contents) is structurally invalid."""


class Unsupported(DecodeError):
    """The file is valid but uses a feature which is not supported."""


################################################################################
# InvalidContainer
################################################################################


class BadMagic(InvalidContainer):
    """
    The magic number (or signature) read from the stream does not match the
    value required by the file format.

    Parameters
    ==========
    container : str
        A description of the magic number checked, e.g. "PNG signature".
    actual : bytes
    expected : bytes
    """

    def __init__(self, container, actual, expected):
        self.container = container
        self.actual = actual
        self.expected = expected
        super(BadMagic, self).__init__()

    def explain(self):
        return """
            Invalid {}: got {}, expected {}.

            Is this file really of the type its name suggests? Was it
            transferred in text mode (which corrupts line endings)?
        """.format(
            self.container,
            FourCC()(self.actual) if len(self.actual) == 4 else repr(self.actual),
            FourCC()(self.expected) if len(self.expected) == 4 else repr(self.expected),
        )


################################################################################
# MalformedHeader
################################################################################


class FormatChunkTooShort(MalformedHeader):
    """
    A WAVE 'fmt ' chunk's declared length is too short to hold a PCM format
    description.
    """

    def __init__(self, length, minimum_length):
        self.length = length
        self.minimum_length = minimum_length
        super(FormatChunkTooShort, self).__init__()

    def explain(self):
        return """
            WAVE format chunk is {} bytes long but must be at least {} bytes.
        """.format(
            self.length,
            self.minimum_length,
        )


class ByteRateMismatch(MalformedHeader):
    """
    The byte rate in a WAVE format chunk does not equal ``bits_per_sample *
    channels * sample_rate / 8``.
    """

    def __init__(self, byte_rate, expected_byte_rate):
        self.byte_rate = byte_rate
        self.expected_byte_rate = expected_byte_rate
        super(ByteRateMismatch, self).__init__()

    def explain(self):
        return """
            WAVE byte rate is {} bytes per second, expected {}.

            The byte rate must equal the sample rate multiplied by the block
            alignment (the number of bytes in one sample frame).
        """.format(
            self.byte_rate,
            self.expected_byte_rate,
        )


class BlockAlignMismatch(MalformedHeader):
    """
    The block alignment in a WAVE format chunk does not equal
    ``(bits_per_sample / 8) * channels``.
    """

    def __init__(self, block_align, expected_block_align):
        self.block_align = block_align
        self.expected_block_align = expected_block_align
        super(BlockAlignMismatch, self).__init__()

    def explain(self):
        return """
            WAVE block alignment is {} bytes, expected {}.

            The block alignment must equal the number of bytes per sample
            multiplied by the number of channels.
        """.format(
            self.block_align,
            self.expected_block_align,
        )


class BadBitsPerSample(MalformedHeader):
    """A WAVE format chunk specifies a PCM sample size other than 8 or 16."""

    def __init__(self, bits_per_sample):
        self.bits_per_sample = bits_per_sample
        super(BadBitsPerSample, self).__init__()

    def explain(self):
        return """
            WAVE sample size of {} bits is not allowed; PCM samples must be 8
            or 16 bits.
        """.format(
            self.bits_per_sample
        )


class BadHeaderSize(MalformedHeader):
    """
    A self-describing structure (e.g. the DDS header) declares a size other
    than the fixed size required by the format.
    """

    def __init__(self, structure, size, expected_size):
        self.structure = structure
        self.size = size
        self.expected_size = expected_size
        super(BadHeaderSize, self).__init__()

    def explain(self):
        return """
            {} declares a size of {} bytes, expected {}.

            Is the file corrupt or are the preceding fields misaligned?
        """.format(
            self.structure,
            self.size,
            self.expected_size,
        )


class BadImageDimensions(MalformedHeader):
    """An image header gives a width or height which describes no pixels."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        super(BadImageDimensions, self).__init__()

    def explain(self):
        return """
            Invalid image dimensions {} x {}.

            Image width must be at least 1. Height must be at least 1 or -1
            (marking a one dimensional image).
        """.format(
            self.width,
            self.height,
        )


################################################################################
# MissingHeader
################################################################################


class MissingFormatChunk(MissingHeader):
    """A WAVE 'data' chunk was found before any 'fmt ' chunk."""

    def explain(self):
        return """
            WAVE data chunk encountered before the format chunk.

            The 'fmt ' chunk describing the sample format must come before the
            'data' chunk.
        """


class MissingImageHeader(MissingHeader):
    """
    The first chunk of a PNG file is not an IHDR chunk.

    The exception argument will contain the type of the chunk found instead
    (or None if the file contains no chunks).
    """

    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super(MissingImageHeader, self).__init__()

    def explain(self):
        if self.chunk_type is None:
            return """
                PNG file contains no chunks.

                The IHDR (image header) chunk must follow the PNG signature.
            """
        return """
            PNG file starts with a {} chunk instead of an IHDR chunk.

            The IHDR (image header) chunk must be the first chunk in a PNG
            file.
        """.format(
            FourCC()(self.chunk_type)
        )


class MissingPalette(MissingHeader):
    """An indexed PNG image contains no PLTE chunk."""

    def explain(self):
        return """
            Indexed-color PNG image has no PLTE (palette) chunk.

            Indexed-color images must include a PLTE chunk before the image
            data.
        """


################################################################################
# InvalidChunk
################################################################################


class BadImageHeaderLength(InvalidChunk):
    """An IHDR chunk is not exactly 13 bytes long."""

    def __init__(self, length, expected_length):
        self.length = length
        self.expected_length = expected_length
        super(BadImageHeaderLength, self).__init__()

    def explain(self):
        return """
            PNG IHDR chunk is {} bytes long, expected {}.
        """.format(
            self.length,
            self.expected_length,
        )


class DuplicateImageHeader(InvalidChunk):
    """A second IHDR chunk was found in a PNG file."""

    def explain(self):
        return """
            PNG file contains more than one IHDR chunk.

            Only the first chunk of a PNG file may be an IHDR chunk.
        """


class DuplicatePalette(InvalidChunk):
    """A second PLTE chunk was found in a PNG file."""

    def explain(self):
        return """
            PNG file contains more than one PLTE chunk.

            A PNG file may contain at most one palette.
        """


class BadPaletteLength(InvalidChunk):
    """
    A PLTE chunk's length is not a multiple of three or describes fewer than
    1 or more than 256 entries.
    """

    def __init__(self, length):
        self.length = length
        super(BadPaletteLength, self).__init__()

    def explain(self):
        return """
            PNG PLTE chunk has an invalid length of {} bytes.

            Palettes must contain between 1 and 256 entries of three bytes
            each (i.e. a length which is a multiple of 3 between 3 and 768).
        """.format(
            self.length
        )


class TransparencyWithoutPalette(InvalidChunk):
    """A tRNS chunk was found in an indexed image before any PLTE chunk."""

    def explain(self):
        return """
            PNG tRNS chunk appears before the PLTE chunk in an indexed-color
            image.

            The transparency table of an indexed-color image gives an alpha
            value for each palette entry and so must follow the PLTE chunk.
        """


class BadTransparencyLength(InvalidChunk):
    """
    A tRNS chunk's length does not match the length required by the image's
    color type.

    Parameters
    ==========
    color_type : int
    length : int
        The length of the tRNS chunk.
    expected_length : int
        The (maximum, for indexed images) allowed length.
    """

    def __init__(self, color_type, length, expected_length):
        self.color_type = color_type
        self.length = length
        self.expected_length = expected_length
        super(BadTransparencyLength, self).__init__()

    def explain(self):
        if self.color_type == PngColorTypes.indexed:
            requirement = "at most {} bytes (one per palette entry)"
        else:
            requirement = "exactly {} bytes"
        return """
            PNG tRNS chunk is {} bytes long but must be {} for {} images.
        """.format(
            self.length,
            requirement.format(self.expected_length),
            enum_to_string(PngColorTypes, self.color_type),
        )


class UnexpectedTransparency(InvalidChunk):
    """
    A tRNS chunk was found in an image whose color type already includes an
    alpha channel.
    """

    def __init__(self, color_type):
        self.color_type = color_type
        super(UnexpectedTransparency, self).__init__()

    def explain(self):
        return """
            PNG tRNS chunk is not allowed in {} images.

            Images with an alpha channel must not also contain a tRNS chunk.
        """.format(
            enum_to_string(PngColorTypes, self.color_type)
        )


class BadFilterType(InvalidChunk):
    """A PNG scanline starts with an unknown filter type byte."""

    def __init__(self, filter_type, row):
        self.filter_type = filter_type
        self.row = row
        super(BadFilterType, self).__init__()

    def explain(self):
        return """
            PNG scanline {} uses an unknown filter type {}.

            Filter types must be between 0 (None) and 4 (Paeth). Is the image
            data corrupt, or was the scanline length computed incorrectly by
            the encoder?
        """.format(
            self.row,
            self.filter_type,
        )


class CorruptImageData(InvalidChunk):
    """The concatenated PNG IDAT chunks are not a valid zlib stream."""

    def __init__(self, message):
        self.message = message
        super(CorruptImageData, self).__init__()

    def explain(self):
        return """
            PNG image data could not be decompressed: {}.

            The IDAT chunks of a PNG file must together form one zlib
            stream.
        """.format(
            self.message
        )


class PaletteIndexOutOfRange(InvalidChunk):
    """An indexed PNG pixel refers to a palette entry which does not exist."""

    def __init__(self, index, palette_entries):
        self.index = index
        self.palette_entries = palette_entries
        super(PaletteIndexOutOfRange, self).__init__()

    def explain(self):
        return """
            PNG pixel uses palette index {} but the palette only has {}
            entries.
        """.format(
            self.index,
            self.palette_entries,
        )


################################################################################
# Unsupported
################################################################################


class UnsupportedCompression(Unsupported):
    """A WAVE file uses a compression code other than PCM."""

    def __init__(self, compression_code):
        self.compression_code = compression_code
        super(UnsupportedCompression, self).__init__()

    def explain(self):
        return """
            WAVE compression code {} is not supported, only PCM (1) audio may
            be decoded.
        """.format(
            enum_to_string(WaveCompressionCodes, self.compression_code)
        )


class UnsupportedAudioFormat(Unsupported):
    """
    A WAVE file's channel count and sample size do not correspond to one of
    the supported :py:class:`~media_decoders.tables.AudioFormats`.
    """

    def __init__(self, channels, bits_per_sample):
        self.channels = channels
        self.bits_per_sample = bits_per_sample
        super(UnsupportedAudioFormat, self).__init__()

    def explain(self):
        return """
            WAVE audio with {} channel(s) of {} bit samples is not supported.

            Supported layouts are: {}.
        """.format(
            self.channels,
            self.bits_per_sample,
            ", ".join(
                "{} channel(s) of {} bits".format(channels, bits)
                for channels, bits in sorted(AUDIO_FORMATS_BY_LAYOUT)
            ),
        )


class UnsupportedPngMethod(Unsupported):
    """
    A PNG IHDR chunk specifies a non-zero compression, filter or interlace
    method.

    Parameters
    ==========
    field : str
        One of "compression", "filter" or "interlace".
    value : int
    """

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super(UnsupportedPngMethod, self).__init__()

    def explain(self):
        return """
            PNG {} method {} is not supported.

            Only non-interlaced images using compression method 0 and filter
            method 0 may be decoded.
        """.format(
            self.field,
            self.value,
        )


class UnsupportedColorType(Unsupported):
    """A PNG IHDR chunk specifies an unknown color type."""

    def __init__(self, color_type):
        self.color_type = color_type
        super(UnsupportedColorType, self).__init__()

    def explain(self):
        return """
            PNG color type {} is not supported.

            Supported color types are: {}.
        """.format(
            self.color_type,
            ", ".join(enum_to_string(PngColorTypes, c) for c in PngColorTypes),
        )


class UnsupportedBitDepth(Unsupported):
    """A PNG bit depth which is not allowed for the image's color type."""

    def __init__(self, color_type, bit_depth, allowed_bit_depths):
        self.color_type = color_type
        self.bit_depth = bit_depth
        self.allowed_bit_depths = allowed_bit_depths
        super(UnsupportedBitDepth, self).__init__()

    def explain(self):
        return """
            PNG bit depth {} is not supported for {} images.

            Supported bit depths for this color type are: {}.
        """.format(
            self.bit_depth,
            enum_to_string(PngColorTypes, self.color_type),
            ", ".join(map(str, self.allowed_bit_depths)),
        )


class UnsupportedPixelMasks(Unsupported):
    """
    An uncompressed DDS file uses a pixel layout other than 8-bit RGB or RGBA
    with byte-aligned masks.
    """

    def __init__(self, flags, r_mask, g_mask, b_mask, a_mask):
        self.flags = flags
        self.r_mask = r_mask
        self.g_mask = g_mask
        self.b_mask = b_mask
        self.a_mask = a_mask
        super(UnsupportedPixelMasks, self).__init__()

    def explain(self):
        hex32 = Hex(8)
        return """
            Uncompressed DDS pixel format with masks R={}, G={}, B={}, A={}
            (flags {}) is not supported.

            Only 8-bit RGB (masks 0x000000FF, 0x0000FF00, 0x00FF0000) and
            RGBA (additionally an alpha pixels flag and alpha mask
            0xFF000000) layouts may be decoded.
        """.format(
            hex32(self.r_mask),
            hex32(self.g_mask),
            hex32(self.b_mask),
            hex32(self.a_mask),
            hex32(self.flags),
        )


class UnsupportedFourCC(Unsupported):
    """A DDS file uses a compression FourCC other than DXT1, DXT3 or DXT5."""

    def __init__(self, fourcc):
        self.fourcc = fourcc
        super(UnsupportedFourCC, self).__init__()

    def explain(self):
        return """
            DDS compression format {} is not supported.

            Supported formats are 'DXT1', 'DXT3' and 'DXT5'.
        """.format(
            FourCC()(self.fourcc)
        )


class UnsupportedCubeMap(Unsupported):
    """The DDS file contains a cube map."""

    def explain(self):
        return """
            DDS cube map textures are not supported.
        """


################################################################################
# TruncatedStream
################################################################################


class TruncatedStream(DecodeError):
    """
    The end of the stream was reached during a read.

    Parameters
    ==========
    num_bytes : int
        The number of bytes the read required.
    num_read : int
        The number of bytes actually available.
    offset : int or None
        The byte offset in the stream at which the read started, if known.
    """

    def __init__(self, num_bytes, num_read, offset=None):
        self.num_bytes = num_bytes
        self.num_read = num_read
        self.offset = offset
        super(TruncatedStream, self).__init__()

    def explain(self):
        return """
            Unexpectedly encountered the end of the stream: needed {} bytes{}
            but only {} were available.

            Is the file truncated? Does a preceding length field overstate the
            size of its data?
        """.format(
            self.num_bytes,
            " at offset {}".format(self.offset) if self.offset is not None else "",
            self.num_read,
        )


class TruncatedImageData(TruncatedStream):
    """
    The decompressed PNG image data ended before every scanline was read.

    Parameters
    ==========
    row : int
        The scanline being read.
    num_bytes : int
    num_read : int
    """

    def __init__(self, row, num_bytes, num_read):
        self.row = row
        super(TruncatedImageData, self).__init__(num_bytes, num_read)

    def explain(self):
        return """
            PNG image data ended in scanline {}: needed {} bytes but only {}
            were available.

            Are any IDAT chunks missing? Do the image dimensions in the IHDR
            chunk match the encoded image?
        """.format(
            self.row,
            self.num_bytes,
            self.num_read,
        )
