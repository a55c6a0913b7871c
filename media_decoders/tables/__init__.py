"""
:py:mod:`media_decoders.tables`: Constants, Enums and Tables-of-Values
=====================================================================

Constants and :py:class:`~enum.Enum` values defined by the supported file
formats (see :py:mod:`media_decoders.tables.constants`) along with the
canonical in-memory formats produced by the decoders and their parameters.
"""

from enum import IntEnum

from collections import namedtuple

from media_decoders.tables import constants
from media_decoders.tables.constants import *

__all__ = [
    "AudioFormats",
    "AudioFormatParameters",
    "AUDIO_FORMAT_PARAMETERS",
    "AUDIO_FORMATS_BY_LAYOUT",
    "ImageFormats",
    "ImageFormatParameters",
    "IMAGE_FORMAT_PARAMETERS",
    "TextureDimensions",
    "TextureFilters",
    "TextureBorders",
    "S3TC_BLOCK_SIZE",
    "PngColorTypeParameters",
    "PNG_COLOR_TYPE_PARAMETERS",
]
__all__ += constants.__all__


################################################################################
# Decoded audio formats
################################################################################


class AudioFormats(IntEnum):
    """The canonical PCM sample layouts produced by the WAVE decoder."""

    mono_8 = 0x1100
    mono_16 = 0x1101
    stereo_8 = 0x1102
    stereo_16 = 0x1103


AudioFormatParameters = namedtuple("AudioFormatParameters", "channels,bits_per_sample")
"""
Parameters
----------
channels : int
bits_per_sample : int
"""

AUDIO_FORMAT_PARAMETERS = {
    AudioFormats.mono_8: AudioFormatParameters(1, 8),
    AudioFormats.mono_16: AudioFormatParameters(1, 16),
    AudioFormats.stereo_8: AudioFormatParameters(2, 8),
    AudioFormats.stereo_16: AudioFormatParameters(2, 16),
}
"""
Lookup from :py:class:`AudioFormats` to :py:class:`AudioFormatParameters`.
"""

AUDIO_FORMATS_BY_LAYOUT = {
    params: audio_format for audio_format, params in AUDIO_FORMAT_PARAMETERS.items()
}
"""
Reverse lookup from ``(channels, bits_per_sample)`` to
:py:class:`AudioFormats`.
"""


################################################################################
# Decoded image formats
################################################################################


class ImageFormats(IntEnum):
    """The canonical pixel layouts produced by the PNG and DDS decoders."""

    red = 0x1903
    rg = 0x8227
    rgb = 0x1907
    rgba = 0x1908

    # 16-bit-per-component (big endian) variants, produced from 16-bit PNGs
    red_16 = 0x822A
    rg_16 = 0x822C
    rgb_16 = 0x8054
    rgba_16 = 0x805B

    # S3TC block compressed formats
    rgb_dxt1 = 0x83F0
    rgba_dxt1 = 0x83F1
    rgba_dxt3 = 0x83F2
    rgba_dxt5 = 0x83F3


ImageFormatParameters = namedtuple(
    "ImageFormatParameters",
    "components,bytes_per_component,has_alpha,compressed,block_bytes",
)
"""
Parameters
----------
components : int
    The number of color components per pixel.
bytes_per_component : int
    For uncompressed formats, the number of bytes per component. For block
    compressed formats, None.
has_alpha : bool
compressed : bool
    True for block compressed formats.
block_bytes : int or None
    For block compressed formats, the number of bytes per 4x4 pixel block.
"""

S3TC_BLOCK_SIZE = 4
"""The width and height (in pixels) of an S3TC block."""

IMAGE_FORMAT_PARAMETERS = {
    ImageFormats.red: ImageFormatParameters(1, 1, False, False, None),
    ImageFormats.rg: ImageFormatParameters(2, 1, True, False, None),
    ImageFormats.rgb: ImageFormatParameters(3, 1, False, False, None),
    ImageFormats.rgba: ImageFormatParameters(4, 1, True, False, None),
    ImageFormats.red_16: ImageFormatParameters(1, 2, False, False, None),
    ImageFormats.rg_16: ImageFormatParameters(2, 2, True, False, None),
    ImageFormats.rgb_16: ImageFormatParameters(3, 2, False, False, None),
    ImageFormats.rgba_16: ImageFormatParameters(4, 2, True, False, None),
    ImageFormats.rgb_dxt1: ImageFormatParameters(3, None, False, True, 8),
    ImageFormats.rgba_dxt1: ImageFormatParameters(4, None, True, True, 8),
    ImageFormats.rgba_dxt3: ImageFormatParameters(4, None, True, True, 16),
    ImageFormats.rgba_dxt5: ImageFormatParameters(4, None, True, True, 16),
}
"""
Lookup from :py:class:`ImageFormats` to :py:class:`ImageFormatParameters`.
"""


################################################################################
# Texture classification and sampling policy
################################################################################


class TextureDimensions(IntEnum):
    """The dimensionality of a loaded texture."""

    texture_1d = 1
    texture_2d = 2
    texture_3d = 3


class TextureFilters(IntEnum):
    """
    Sampling filter requested for a texture. Carried through to the loaded
    texture unchanged; it has no influence on decoding.
    """

    point = 0
    bilinear = 1
    trilinear = 2
    anisotropic_2 = 3
    anisotropic_4 = 4
    anisotropic_8 = 5
    anisotropic_16 = 6


class TextureBorders(IntEnum):
    """
    Texture coordinate wrapping mode requested for a texture. Carried through
    to the loaded texture unchanged.
    """

    repeat = 0x2901
    clamp_to_edge = 0x812F
    clamp_to_border = 0x812D
    mirrored_repeat = 0x8370


################################################################################
# PNG color types
################################################################################


PngColorTypeParameters = namedtuple(
    "PngColorTypeParameters",
    "channels,allowed_bit_depths",
)
"""
Parameters
----------
channels : int
    The number of samples per pixel in the encoded image.
allowed_bit_depths : tuple
    The bit depths a PNG file may use with this color type.
"""

PNG_COLOR_TYPE_PARAMETERS = {
    PngColorTypes.greyscale: PngColorTypeParameters(1, (1, 2, 4, 8, 16)),
    PngColorTypes.truecolor: PngColorTypeParameters(3, (8, 16)),
    PngColorTypes.indexed: PngColorTypeParameters(1, (1, 2, 4, 8)),
    PngColorTypes.greyscale_alpha: PngColorTypeParameters(2, (8, 16)),
    PngColorTypes.truecolor_alpha: PngColorTypeParameters(4, (8, 16)),
}
"""
Lookup from :py:class:`PngColorTypes` to :py:class:`PngColorTypeParameters`.
"""
