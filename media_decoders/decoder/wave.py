"""
The :py:mod:`media_decoders.decoder.wave` module decodes PCM audio from
RIFF/WAVE files.

A WAVE file is a RIFF container holding a sequence of tagged, length-prefixed
sub-chunks (all integers little-endian). Two sub-chunks matter here: the
``fmt `` chunk describing the sample layout and the ``data`` chunk holding the
samples. All other chunks are skipped.

.. autofunction:: decode_wave

.. autofunction:: read_format_chunk

.. autoclass:: WaveHeader
"""

import logging

from media_decoders.fixeddict import fixeddict, Entry

from media_decoders.tables import (
    RIFF_MAGIC,
    WAVE_MAGIC,
    WAVE_FORMAT_CHUNK,
    WAVE_DATA_CHUNK,
    WAVE_FORMAT_CHUNK_BYTES,
    WaveCompressionCodes,
    AudioFormats,
    AUDIO_FORMATS_BY_LAYOUT,
)

from media_decoders.assets import DecodedAudio, PcmStream

from media_decoders.decoder.io import (
    State,
    init_io,
    tell,
    read_bytes,
    read_payload,
    skip_bytes,
    read_uint_le,
)

from media_decoders.decoder.exceptions import (
    BadMagic,
    FormatChunkTooShort,
    ByteRateMismatch,
    BlockAlignMismatch,
    BadBitsPerSample,
    MissingFormatChunk,
    UnsupportedCompression,
    UnsupportedAudioFormat,
)

__all__ = [
    "WaveHeader",
    "decode_wave",
    "read_format_chunk",
]


WaveHeader = fixeddict(
    "WaveHeader",
    Entry("compression_code", enum=WaveCompressionCodes),
    Entry("channels"),
    Entry("sample_rate"),
    Entry("byte_rate"),
    Entry("block_align"),
    Entry("bits_per_sample"),
    Entry("format", enum=AudioFormats, formatter=hex),
    help="""
        The contents of a WAVE 'fmt ' chunk along with the
        :py:class:`~media_decoders.tables.AudioFormats` it describes.
    """,
)


def read_riff_header(state):
    """Read and check the RIFF container header and WAVE form type."""
    magic = read_bytes(state, 4)
    if magic != RIFF_MAGIC:
        raise BadMagic("RIFF magic number", magic, RIFF_MAGIC)

    # Container size: not needed since chunks are read until 'data'
    read_bytes(state, 4)

    form_type = read_bytes(state, 4)
    if form_type != WAVE_MAGIC:
        raise BadMagic("RIFF form type", form_type, WAVE_MAGIC)


def read_format_chunk(state, length):
    """
    Read the body of a 'fmt ' chunk of the given length, returning a
    :py:class:`WaveHeader`.

    Checks are carried out in the following order: compression code, byte
    rate against the sample size, sample size, block alignment, then byte
    rate against block alignment, and finally the channel/sample size
    combination.
    """
    if length < WAVE_FORMAT_CHUNK_BYTES:
        raise FormatChunkTooShort(length, WAVE_FORMAT_CHUNK_BYTES)

    header = state["header"] = WaveHeader()

    header["compression_code"] = read_uint_le(state, 2)
    if header["compression_code"] != WaveCompressionCodes.pcm:
        raise UnsupportedCompression(header["compression_code"])

    header["channels"] = read_uint_le(state, 2)
    header["sample_rate"] = read_uint_le(state, 4)
    header["byte_rate"] = read_uint_le(state, 4)
    header["block_align"] = read_uint_le(state, 2)
    header["bits_per_sample"] = read_uint_le(state, 2)

    # Skip any extension (e.g. cbSize)
    skip_bytes(state, length - WAVE_FORMAT_CHUNK_BYTES)

    channels = header["channels"]
    bits_per_sample = header["bits_per_sample"]

    expected_byte_rate = (bits_per_sample * channels * header["sample_rate"]) // 8
    if header["byte_rate"] != expected_byte_rate:
        raise ByteRateMismatch(header["byte_rate"], expected_byte_rate)

    if bits_per_sample not in (8, 16):
        raise BadBitsPerSample(bits_per_sample)

    expected_block_align = (bits_per_sample // 8) * channels
    if header["block_align"] != expected_block_align:
        raise BlockAlignMismatch(header["block_align"], expected_block_align)

    expected_byte_rate = header["block_align"] * header["sample_rate"]
    if header["byte_rate"] != expected_byte_rate:
        raise ByteRateMismatch(header["byte_rate"], expected_byte_rate)

    try:
        header["format"] = AUDIO_FORMATS_BY_LAYOUT[(channels, bits_per_sample)]
    except KeyError:
        raise UnsupportedAudioFormat(channels, bits_per_sample)

    logging.debug("decode_wave: %s", header)

    return header


def decode_wave(f, descriptor=None):
    """
    Decode a WAVE file.

    Parameters
    ==========
    f : file-like object
        A binary file positioned at the start of the WAVE file.
    descriptor : :py:class:`~media_decoders.assets.AudioDescriptor` or None
        If the descriptor's 'streaming' entry is True, the PCM payload is not
        read. Instead the returned 'data' is a
        :py:class:`~media_decoders.assets.PcmStream` which takes ownership of
        'f'. Otherwise the payload is read into memory.

    Returns
    =======
    audio : :py:class:`~media_decoders.assets.DecodedAudio`

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.DecodeError`
    """
    streaming = bool(descriptor is not None and descriptor.get("streaming", False))

    state = State()
    init_io(state, f)

    read_riff_header(state)

    while True:
        chunk_type = read_bytes(state, 4)
        length = read_uint_le(state, 4)
        logging.debug("decode_wave: chunk %r (%d bytes)", chunk_type, length)

        if chunk_type == WAVE_FORMAT_CHUNK:
            read_format_chunk(state, length)
        elif chunk_type == WAVE_DATA_CHUNK:
            header = state.get("header")
            if header is None:
                raise MissingFormatChunk()

            audio = DecodedAudio(
                format=header["format"],
                sample_rate=header["sample_rate"],
                frames=length // header["block_align"],
            )
            if streaming:
                audio["data"] = PcmStream(f, tell(state), length)
            else:
                audio["data"] = read_payload(state, length)
            return audio
        else:
            skip_bytes(state, length)
