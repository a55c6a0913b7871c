"""
The :py:mod:`media_decoders.decoder` module contains the WAVE, PNG and DDS
decoders. The decoders are independent of one another but share a common
interface::

    decode_xxx(f, descriptor=None)

where 'f' is a binary file-like object and 'descriptor' expresses caller
policy (see :py:mod:`media_decoders.assets`).

Usage
-----

The following snippet illustrates how a file might be decoded and any
decoding error explained::

    >>> from media_decoders.string_utils import wrap_paragraphs
    >>> from media_decoders.decoder import decode_png, DecodeError

    >>> try:
    ...     with open("path/to/image.png", "rb") as f:
    ...         image = decode_png(f)
    ...     print(image)
    ... except DecodeError as e:
    ...     print("Image could not be decoded:")
    ...     print(wrap_paragraphs(e.explain(), 80))
    Image could not be decoded:
    PNG color type 5 is not supported.
    <BLANKLINE>
    Supported color types are: greyscale (0), truecolor (2), indexed (3),
    greyscale alpha (4), truecolor alpha (6).

Decoding errors are reported as
:py:exc:`~media_decoders.decoder.exceptions.DecodeError` exceptions. Each
decoder stops at the first error and never returns a partially decoded
result.

Internally every decode call creates its own
:py:class:`~media_decoders.decoder.io.State` dictionary holding the file being
read and the header under construction. No state is shared between calls.

Debugging
---------

The parsed headers, chunks and mip levels are logged at
:py:data:`logging.DEBUG` level.
"""

from media_decoders.decoder.exceptions import *
from media_decoders.decoder.io import *
from media_decoders.decoder.wave import *
from media_decoders.decoder.png import *
from media_decoders.decoder.dds import *
