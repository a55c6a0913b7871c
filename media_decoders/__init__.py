"""
The :py:mod:`media_decoders` package contains validating decoders for three
binary media formats commonly used as game and engine assets, along with a
small asset loading layer built on top of them.


Main components
---------------

* The decoders (:py:mod:`media_decoders.decoder`): PCM WAVE audio
  (:py:mod:`~media_decoders.decoder.wave`), PNG images
  (:py:mod:`~media_decoders.decoder.png`) and DDS textures
  (:py:mod:`~media_decoders.decoder.dds`). Each turns a binary file-like
  object into a fully populated result structure or raises a
  :py:exc:`~media_decoders.decoder.exceptions.DecodeError` explaining what
  is wrong with the input.
* The result and descriptor structures (:py:mod:`media_decoders.assets`).
* An asset manager (:py:mod:`media_decoders.loader`) which finds files
  beneath a root directory and dispatches them to a decoder by extension.
* A raw dump file format (:py:mod:`media_decoders.file_format`) for
  inspecting decoded payloads with other tools.
* The ``media-asset-validator`` command line tool
  (:py:mod:`media_decoders.scripts.media_asset_validator`).

The decoders share no state with one another or between calls. Each decode
call builds its header in a call-local
:py:class:`~media_decoders.decoder.io.State` dictionary and returns a newly
allocated result.


Supporting modules
------------------

Constants and parameter tables for the supported formats live in
:py:mod:`media_decoders.tables`. All header and result structures are
:py:mod:`~media_decoders.fixeddict` types which are pretty printed using the
formatters in :py:mod:`media_decoders.string_formatters`.
"""

from media_decoders.version import __version__
