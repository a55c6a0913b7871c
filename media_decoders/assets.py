"""
The :py:mod:`media_decoders.assets` module defines the structures returned by
the decoders and loaders, along with the descriptors callers use to express
how an asset should be loaded.

Decoded payloads
----------------

.. autoclass:: DecodedImage

.. autoclass:: DecodedAudio

.. autoclass:: PcmStream
    :members:

.. autofunction:: image_byte_length

Loader results
--------------

.. autoclass:: Texture

Descriptors
-----------

.. autoclass:: AudioDescriptor

.. autoclass:: TextureDescriptor
"""

import io

from media_decoders.fixeddict import fixeddict, Entry

from media_decoders.string_formatters import Bytes, Object

from media_decoders.tables import (
    AudioFormats,
    ImageFormats,
    IMAGE_FORMAT_PARAMETERS,
    S3TC_BLOCK_SIZE,
    TextureDimensions,
    TextureFilters,
    TextureBorders,
)

__all__ = [
    "DecodedImage",
    "DecodedAudio",
    "PcmStream",
    "Texture",
    "AudioDescriptor",
    "TextureDescriptor",
    "image_byte_length",
]


def ceil_div(a, b):
    return -(-a // b)


def image_byte_length(image_format, width, height, depth=1):
    """
    Compute the number of bytes in an image of the specified format and
    dimensions.

    For uncompressed formats this is ``width * height * depth * components *
    bytes_per_component``. For block compressed formats each dimension is
    rounded up to a whole number of 4 pixel blocks.
    """
    params = IMAGE_FORMAT_PARAMETERS[image_format]
    if params.compressed:
        return (
            ceil_div(width, S3TC_BLOCK_SIZE)
            * ceil_div(height, S3TC_BLOCK_SIZE)
            * ceil_div(depth, S3TC_BLOCK_SIZE)
            * params.block_bytes
        )
    else:
        return width * height * depth * params.components * params.bytes_per_component


class PcmStream(object):
    """
    A handle on the PCM payload of a WAVE file which has not yet been read.

    Reads never go past the end of the declared payload. The underlying file
    is owned by this object once it has been returned: close it with
    :py:meth:`close` (or by using the stream as a context manager).

    Parameters
    ==========
    f : file-like object
        The source file, positioned at the start of the payload.
    offset : int or None
        The byte offset of the payload within 'f' (None if 'f' cannot report
        its position, in which case :py:meth:`reset` is not available).
    length : int
        The declared payload length in bytes.
    """

    def __init__(self, f, offset, length):
        self.file = f
        self.offset = offset
        self.length = length
        self._position = 0

    @property
    def remaining(self):
        """The number of payload bytes not yet read."""
        return self.length - self._position

    def read(self, size=-1):
        """
        Read up to 'size' bytes of payload (or all remaining payload if
        'size' is negative). Returns an empty :py:class:`bytes` once the
        payload (or the underlying file) is exhausted.
        """
        if size is None or size < 0 or size > self.remaining:
            size = self.remaining
        if size == 0:
            return b""
        data = self.file.read(size)
        self._position += len(data)
        return data

    def reset(self):
        """Return to the start of the payload. The source must be seekable."""
        if self.offset is None:
            raise io.UnsupportedOperation("PCM source stream is not seekable")
        self.file.seek(self.offset)
        self._position = 0

    def close(self):
        self.file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "<{} offset={!r} length={!r} remaining={!r}>".format(
            type(self).__name__, self.offset, self.length, self.remaining,
        )


def format_payload(data):
    """Format either a bytes payload or a :py:class:`PcmStream`."""
    if isinstance(data, (bytes, bytearray)):
        return Bytes()(data)
    else:
        return Object()(data)


DecodedImage = fixeddict(
    "DecodedImage",
    Entry("format", enum=ImageFormats, formatter=hex),
    Entry("width"),
    Entry("height"),
    Entry("depth"),
    Entry("level", help="The mip level index (0 is the full size image)."),
    Entry(
        "data",
        formatter=Bytes(),
        help="""
            The pixel data: exactly
            :py:func:`image_byte_length(format, width, height, depth)
            <image_byte_length>` bytes.
        """,
    ),
    help="""
        A decoded image (or one mip level of a texture).
    """,
)

DecodedAudio = fixeddict(
    "DecodedAudio",
    Entry("format", enum=AudioFormats, formatter=hex),
    Entry("sample_rate", help="Sample frames per second."),
    Entry("frames", help="The number of sample frames in the payload."),
    Entry(
        "data",
        formatter=format_payload,
        help="""
            The PCM samples as :py:class:`bytes` or, when streaming was
            requested, a :py:class:`PcmStream`.
        """,
    ),
    help="""
        Decoded PCM audio.
    """,
)

Texture = fixeddict(
    "Texture",
    Entry("dimensions", enum=TextureDimensions),
    Entry(
        "images",
        formatter=lambda images: "{} mip level(s)".format(len(images)),
        help="List of :py:class:`DecodedImage`, one per mip level.",
    ),
    Entry("descriptor", help="The :py:class:`TextureDescriptor` used."),
    help="""
        A texture produced by a loader. The number of dimensions determines
        how the images are to be interpreted.
    """,
)

AudioDescriptor = fixeddict(
    "AudioDescriptor",
    Entry(
        "streaming",
        help="""
            If True, decoding stops at the start of the PCM payload and a
            :py:class:`PcmStream` is returned instead of the samples. Defaults
            to False.
        """,
    ),
    help="""
        Caller policy for loading audio.
    """,
)

TextureDescriptor = fixeddict(
    "TextureDescriptor",
    Entry("filter", enum=TextureFilters),
    Entry("border_x", enum=TextureBorders, formatter=hex),
    Entry("border_y", enum=TextureBorders, formatter=hex),
    Entry("border_z", enum=TextureBorders, formatter=hex),
    help="""
        Sampling policy for a texture. These values are passed through to the
        :py:class:`Texture` unchanged and have no effect on decoding.
    """,
)
