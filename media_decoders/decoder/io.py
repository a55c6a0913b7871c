"""
The :py:mod:`media_decoders.decoder.io` module implements the low-level I/O
functions used by the decoders to read byte streams from file-like objects.


Initialisation
--------------

The :py:func:`init_io` function must be used to initialise a :py:class:`State`
dictionary so that it is ready to read a stream.

.. autofunction:: init_io


Determining stream position
---------------------------

The :py:func:`tell` function is used to report the byte offsets at which
decoding errors occur and to record where streamed payloads begin.

.. autofunction:: tell


Reading
-------

All reads are of a fixed number of bytes. If a read cannot be satisfied a
:py:exc:`~media_decoders.decoder.exceptions.TruncatedStream` exception is
raised. Only :py:func:`read_payload` retries after a short read; all other
functions treat one short read as the end of the stream.

Integers are decoded using :py:mod:`struct`.
"""

import struct

from media_decoders.fixeddict import fixeddict, Entry

from media_decoders.string_formatters import Object

from media_decoders.decoder.exceptions import TruncatedStream

__all__ = [
    "State",
    "init_io",
    "tell",
    "read_bytes",
    "read_bytes_or_eof",
    "read_payload",
    "skip_bytes",
    "read_uint_le",
    "read_sint_le",
    "read_uint_be",
    "read_sint_be",
]


State = fixeddict(
    "State",
    Entry(
        "header",
        help="""
            The header structure being built by the current decode call (a
            format-specific fixeddict).
        """,
    ),
    Entry(
        "_file",
        formatter=Object(),
        help="The file-like object being read. Set by :py:func:`init_io`.",
    ),
    help="""
        The per-call state of a decoder. A new :py:class:`State` is created
        for every decode so no state is shared between decodes.
    """,
)

PAYLOAD_READ_CHUNK_BYTES = 64 * 1024
"""The maximum number of bytes requested by a single read in read_payload."""

STRUCT_CODES = {1: "B", 2: "H", 4: "I", 8: "Q"}
"""Lookup from integer size (bytes) to unsigned :py:mod:`struct` format code."""


def init_io(state, f):
    """
    Initialise the I/O-related variables in state.

    Parameters
    ==========
    state : :py:class:`State`
        The state dictionary to be initialised.
    f : file-like object
        The (binary) file to read from.
    """
    state["_file"] = f


def tell(state):
    """
    Return the byte offset of the next byte to be read or None if the
    underlying file does not support reporting its position (e.g. a pipe).
    """
    try:
        return state["_file"].tell()
    except (AttributeError, OSError):
        return None


def read_bytes(state, num_bytes):
    """
    Read exactly 'num_bytes' bytes, returning a :py:class:`bytes`.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.TruncatedStream`
        If fewer than 'num_bytes' bytes are returned.
    """
    offset = tell(state)
    data = state["_file"].read(num_bytes)
    if len(data) != num_bytes:
        raise TruncatedStream(num_bytes, len(data), offset)
    return data


def read_bytes_or_eof(state, num_bytes):
    """
    Like :py:func:`read_bytes` but returns None if the stream ends before the
    first byte is read. A stream ending part way through the read still
    raises :py:exc:`~media_decoders.decoder.exceptions.TruncatedStream`.
    """
    offset = tell(state)
    data = state["_file"].read(num_bytes)
    if len(data) == 0:
        return None
    elif len(data) != num_bytes:
        raise TruncatedStream(num_bytes, len(data), offset)
    return data


def read_payload(state, num_bytes):
    """
    Read exactly 'num_bytes' bytes into a new :py:class:`bytes`, repeating the
    read after short reads until either all bytes have been read or the
    stream ends.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.TruncatedStream`
        If the stream ends early.
    """
    offset = tell(state)
    out = bytearray()
    while len(out) < num_bytes:
        data = state["_file"].read(min(PAYLOAD_READ_CHUNK_BYTES, num_bytes - len(out)))
        if not data:
            raise TruncatedStream(num_bytes, len(out), offset)
        out += data
    return bytes(out)


def skip_bytes(state, num_bytes):
    """
    Discard the next 'num_bytes' bytes of the stream.

    The bytes are read (rather than seeked over) so that a truncated stream
    is always detected, even for seekable files.
    """
    offset = tell(state)
    remaining = num_bytes
    while remaining > 0:
        data = state["_file"].read(min(PAYLOAD_READ_CHUNK_BYTES, remaining))
        if not data:
            raise TruncatedStream(num_bytes, num_bytes - remaining, offset)
        remaining -= len(data)


def read_uint_le(state, num_bytes):
    """Read a little-endian unsigned integer of the specified size in bytes."""
    return struct.unpack("<" + STRUCT_CODES[num_bytes], read_bytes(state, num_bytes))[0]


def read_sint_le(state, num_bytes):
    """Read a little-endian two's complement integer."""
    return struct.unpack(
        "<" + STRUCT_CODES[num_bytes].lower(), read_bytes(state, num_bytes)
    )[0]


def read_uint_be(state, num_bytes):
    """Read a big-endian unsigned integer of the specified size in bytes."""
    return struct.unpack(">" + STRUCT_CODES[num_bytes], read_bytes(state, num_bytes))[0]


def read_sint_be(state, num_bytes):
    """Read a big-endian two's complement integer."""
    return struct.unpack(
        ">" + STRUCT_CODES[num_bytes].lower(), read_bytes(state, num_bytes)
    )[0]
