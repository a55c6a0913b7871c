"""
The :py:mod:`media_decoders.file_format` module contains functions for
writing decoded images and audio to files (and reading them back again) so
that the output of the decoders can be inspected using other tools.

Each decoded payload is stored as a pair of files: a '.raw' file containing
the payload bytes verbatim and a '.json' file containing the metadata
required to interpret them. For example, a 4x2 RGB image would be stored as::

    image.raw   (24 bytes of RGB pixel data)
    image.json  {"kind": "image", "format": "rgb", "width": 4, "height": 2,
                 "depth": 1, "level": 0}

The following functions may be used to read and write payload/metadata files:

.. autofunction:: read

.. autofunction:: write_image

.. autofunction:: write_audio

The above functions are wrappers around the following functions which read
and write metadata files in isolation:

.. autofunction:: read_metadata

.. autofunction:: write_metadata

Finally, the following function may be used to get the filenames for both
parts of a payload/metadata file pair:

.. autofunction:: get_metadata_and_data_filenames

"""

import os
import json

from media_decoders.tables import AudioFormats, ImageFormats

from media_decoders.assets import (
    DecodedImage,
    DecodedAudio,
    PcmStream,
    image_byte_length,
)

from media_decoders.decoder.exceptions import TruncatedStream


__all__ = [
    "read",
    "write_image",
    "write_audio",
    "get_metadata_and_data_filenames",
    "read_metadata",
    "write_metadata",
]


IMAGE_METADATA_FIELDS = ("width", "height", "depth", "level")
AUDIO_METADATA_FIELDS = ("sample_rate", "frames")


def get_metadata_and_data_filenames(filename):
    """
    Given either the filename of a saved payload (.raw) or metadata file
    (.json), return a (metadata_filename, data_filename) tuple with the
    names of the two corresponding files.
    """
    base_name = os.path.splitext(filename)[0]
    return (
        "{}.json".format(base_name),
        "{}.raw".format(base_name),
    )


def write_metadata(asset, file):
    """
    Write the metadata (everything except the payload) of a
    :py:class:`~media_decoders.assets.DecodedImage` or
    :py:class:`~media_decoders.assets.DecodedAudio` to a file as JSON.

    Parameters
    ==========
    asset : :py:class:`~media_decoders.assets.DecodedImage` or :py:class:`~media_decoders.assets.DecodedAudio`
    file : :py:class:`file`
        A file open for binary writing.
    """
    if isinstance(asset, DecodedImage):
        metadata = {"kind": "image", "format": ImageFormats(asset["format"]).name}
        fields = IMAGE_METADATA_FIELDS
    else:
        metadata = {"kind": "audio", "format": AudioFormats(asset["format"]).name}
        fields = AUDIO_METADATA_FIELDS

    for field in fields:
        metadata[field] = int(asset[field])

    file.write(json.dumps(metadata).encode("utf-8"))


def read_metadata(file):
    """
    Read a JSON metadata file.

    Parameters
    ==========
    file : :py:class:`file`
        A file open for binary reading.

    Returns
    =======
    asset : :py:class:`~media_decoders.assets.DecodedImage` or :py:class:`~media_decoders.assets.DecodedAudio`
        The described asset without its 'data' entry.
    """
    metadata = json.loads(file.read().decode("utf-8"))

    if metadata["kind"] == "image":
        asset = DecodedImage(format=ImageFormats[metadata["format"]])
        fields = IMAGE_METADATA_FIELDS
    elif metadata["kind"] == "audio":
        asset = DecodedAudio(format=AudioFormats[metadata["format"]])
        fields = AUDIO_METADATA_FIELDS
    else:
        raise ValueError("Unknown asset kind {!r}".format(metadata["kind"]))

    for field in fields:
        asset[field] = int(metadata[field])

    return asset


def write_image(image, filename):
    """
    Write a :py:class:`~media_decoders.assets.DecodedImage` to a data and
    metadata file.

    Parameters
    ==========
    image : :py:class:`~media_decoders.assets.DecodedImage`
    filename : str
        The filename of either the data file (.raw) or metadata file (.json).
        The name of the other file will be inferred automatically.
    """
    metadata_filename, data_filename = get_metadata_and_data_filenames(filename)

    with open(metadata_filename, "wb") as f:
        write_metadata(image, f)

    with open(data_filename, "wb") as f:
        f.write(image["data"])


def read_pcm_stream(stream):
    """
    Read the remainder of a :py:class:`~media_decoders.assets.PcmStream`,
    continuing after short reads until the declared payload length is
    reached.
    """
    num_bytes = stream.remaining
    data = bytearray()
    while stream.remaining:
        chunk = stream.read()
        if not chunk:
            raise TruncatedStream(num_bytes, len(data))
        data += chunk
    return bytes(data)


def write_audio(audio, filename):
    """
    Write a :py:class:`~media_decoders.assets.DecodedAudio` to a data and
    metadata file.

    If the audio's data is a :py:class:`~media_decoders.assets.PcmStream`,
    the remainder of the stream is read and written out (the stream is not
    closed).

    Parameters
    ==========
    audio : :py:class:`~media_decoders.assets.DecodedAudio`
    filename : str
        The filename of either the data file (.raw) or metadata file (.json).
        The name of the other file will be inferred automatically.

    Raises
    ======
    :py:exc:`~media_decoders.decoder.exceptions.TruncatedStream`
        If a streamed payload ends before its declared length. Neither file
        is written.
    """
    metadata_filename, data_filename = get_metadata_and_data_filenames(filename)

    data = audio["data"]
    if isinstance(data, PcmStream):
        data = read_pcm_stream(data)

    with open(metadata_filename, "wb") as f:
        write_metadata(audio, f)

    with open(data_filename, "wb") as f:
        f.write(data)


def read(filename):
    """
    Read a decoded image or audio payload from a data and metadata file.

    Parameters
    ==========
    filename : str
        The filename of either the data file (.raw) or metadata file (.json).
        The name of the other file will be inferred automatically.

    Returns
    =======
    asset : :py:class:`~media_decoders.assets.DecodedImage` or :py:class:`~media_decoders.assets.DecodedAudio`

    Raises
    ======
    ValueError
        If the length of an image's data file does not match its metadata.
    """
    metadata_filename, data_filename = get_metadata_and_data_filenames(filename)

    with open(metadata_filename, "rb") as f:
        asset = read_metadata(f)

    with open(data_filename, "rb") as f:
        data = f.read()

    if isinstance(asset, DecodedImage):
        expected_length = image_byte_length(
            asset["format"], asset["width"], asset["height"], asset["depth"]
        )
        if len(data) != expected_length:
            raise ValueError(
                "Image data file contains {} bytes, expected {}".format(
                    len(data), expected_length
                )
            )

    asset["data"] = data

    return asset
