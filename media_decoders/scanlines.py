"""
The :py:mod:`media_decoders.scanlines` module implements the pixel-level
algorithms used to reconstruct PNG images: scanline unfiltering, unpacking of
sub-byte samples and expansion of each row into one of the canonical
:py:class:`~media_decoders.tables.ImageFormats`.

Scanline unfiltering
--------------------

PNG encoders may transform each scanline using one of five filters (see
:py:class:`~media_decoders.tables.PngFilterTypes`) which predict each byte
from its already-decoded neighbours:

* 'left' (the corresponding byte of the previous pixel, ``bpp`` bytes earlier),
* 'above' (the same byte in the previous scanline),
* 'upper left' (the corresponding byte of the previous pixel in the previous
  scanline).

Neighbours which lie outside the image (left of the first pixel or above the
first row) are taken to be zero. All arithmetic is modulo 256.

.. autofunction:: unfilter_scanline

.. autofunction:: paeth_predictor

.. autofunction:: filter_bytes_per_pixel

.. autofunction:: scanline_bytes

Row expansion
-------------

Row expansion uses :py:mod:`numpy` to operate on whole rows at once.

.. autofunction:: unpack_samples

.. autofunction:: scale_samples

.. autofunction:: build_palette

.. autofunction:: expand_scanline
"""

import numpy as np

from media_decoders.tables import PngColorTypes, PngFilterTypes

__all__ = [
    "filter_bytes_per_pixel",
    "scanline_bytes",
    "paeth_predictor",
    "unfilter_scanline",
    "unpack_samples",
    "scale_samples",
    "build_palette",
    "expand_scanline",
]


def filter_bytes_per_pixel(channels, bit_depth):
    """
    The offset (in bytes) of the 'left' neighbour used by the filters: the
    number of bytes per complete pixel, rounded up to one byte for bit depths
    below 8.
    """
    return max(1, (channels * bit_depth) // 8)


def scanline_bytes(width, channels, bit_depth):
    """The number of bytes in one (unfiltered) scanline, excluding the filter byte."""
    return (width * channels * bit_depth + 7) // 8


def paeth_predictor(left, above, upper_left):
    """
    Return whichever of 'left', 'above' or 'upper_left' is closest to ``left
    + above - upper_left``, preferring them in that order in the event of a
    tie.
    """
    p = left + above - upper_left
    p_left = abs(p - left)
    p_above = abs(p - above)
    p_upper_left = abs(p - upper_left)
    if p_left <= p_above and p_left <= p_upper_left:
        return left
    elif p_above <= p_upper_left:
        return above
    else:
        return upper_left


def unfilter_scanline(filter_type, scanline, prior, bpp):
    """
    Reverse the filter applied to a scanline, in place.

    Parameters
    ==========
    filter_type : :py:class:`~media_decoders.tables.PngFilterTypes`
    scanline : bytearray
        The filtered scanline (without its filter type byte). Replaced with
        the reconstructed bytes.
    prior : bytearray
        The reconstructed previous scanline (all zeros for the first row).
        Must be the same length as 'scanline'.
    bpp : int
        See :py:func:`filter_bytes_per_pixel`.

    Raises
    ======
    ValueError
        If 'filter_type' is not a known filter type.
    """
    length = len(scanline)

    if filter_type == PngFilterTypes.none:
        pass
    elif filter_type == PngFilterTypes.sub:
        for i in range(bpp, length):
            scanline[i] = (scanline[i] + scanline[i - bpp]) & 0xFF
    elif filter_type == PngFilterTypes.up:
        for i in range(length):
            scanline[i] = (scanline[i] + prior[i]) & 0xFF
    elif filter_type == PngFilterTypes.average:
        for i in range(min(bpp, length)):
            scanline[i] = (scanline[i] + (prior[i] >> 1)) & 0xFF
        for i in range(bpp, length):
            scanline[i] = (scanline[i] + ((scanline[i - bpp] + prior[i]) >> 1)) & 0xFF
    elif filter_type == PngFilterTypes.paeth:
        # With no left or upper-left neighbour, Paeth always predicts 'above'
        for i in range(min(bpp, length)):
            scanline[i] = (scanline[i] + prior[i]) & 0xFF
        for i in range(bpp, length):
            scanline[i] = (
                scanline[i]
                + paeth_predictor(scanline[i - bpp], prior[i], prior[i - bpp])
            ) & 0xFF
    else:
        raise ValueError("Unknown filter type {}".format(filter_type))


def unpack_samples(row, bit_depth, count):
    """
    Unpack 'count' samples of 'bit_depth' (1, 2 or 4) bits each, packed most
    significant bits first, from the bytes-like 'row'. Returns a
    :py:class:`numpy.ndarray` of ``uint8`` with one sample per element.

    Only the bytes of 'row' are read; padding bits in the final byte are
    discarded.
    """
    packed = np.frombuffer(bytes(row), dtype=np.uint8)
    shifts = np.arange(8 - bit_depth, -1, -bit_depth, dtype=np.uint8)
    mask = (1 << bit_depth) - 1
    samples = (packed[:, np.newaxis] >> shifts) & mask
    return samples.reshape(-1)[:count].astype(np.uint8)


def scale_samples(samples, bit_depth):
    """
    Scale samples of 'bit_depth' (1, 2 or 4) bits to the full 8 bit range
    (e.g. a 2 bit sample of 3 becomes 255).
    """
    return (samples * (0xFF // ((1 << bit_depth) - 1))).astype(np.uint8)


def build_palette(palette, transparency=None):
    """
    Build the RGBA lookup table for an indexed image.

    Parameters
    ==========
    palette : bytes
        The PLTE chunk: one RGB triplet per entry.
    transparency : bytes or None
        The tRNS chunk: one alpha value per palette entry. May be shorter
        than the palette (or absent) in which case the remaining entries are
        opaque.

    Returns
    =======
    table : :py:class:`numpy.ndarray`
        A ``(entries, 4)`` array of ``uint8``.
    """
    entries = len(palette) // 3
    table = np.full((entries, 4), 0xFF, dtype=np.uint8)
    table[:, :3] = np.frombuffer(bytes(palette), dtype=np.uint8).reshape(entries, 3)
    if transparency:
        alpha = np.frombuffer(bytes(transparency), dtype=np.uint8)
        table[: len(alpha), 3] = alpha
    return table


def transparency_alpha(mask, dtype):
    """Alpha samples which are zero where 'mask' is True and maximum elsewhere."""
    return np.where(mask, 0, np.iinfo(dtype).max)


def expand_scanline(row, color_type, bit_depth, width, palette=None, transparency=None):
    """
    Convert one reconstructed scanline into the canonical layout.

    Parameters
    ==========
    row : bytes-like
        The unfiltered scanline.
    color_type : :py:class:`~media_decoders.tables.PngColorTypes`
    bit_depth : int
    width : int
        The number of pixels in the row.
    palette : :py:class:`numpy.ndarray` or None
        For indexed images, the table produced by :py:func:`build_palette`.
    transparency : bytes or None
        For greyscale and truecolor images, the tRNS chunk (if present).

    Returns
    =======
    row : bytes
        For greyscale and truecolor images: one (or, with transparency, two)
        or three (or four) components per pixel. For indexed images: RGBA.
        Components are 1 byte (or 2 big-endian bytes for 16 bit images).

    Raises
    ======
    IndexError
        If an indexed pixel refers to an entry beyond the end of the palette.
    """
    dtype = np.dtype(">u2") if bit_depth == 16 else np.dtype(np.uint8)

    if color_type == PngColorTypes.indexed:
        if bit_depth < 8:
            indices = unpack_samples(row, bit_depth, width)
        else:
            indices = np.frombuffer(bytes(row), dtype=np.uint8)[:width]
        if len(indices) and int(indices.max()) >= len(palette):
            raise IndexError(int(indices.max()))
        return palette[indices].tobytes()

    elif color_type == PngColorTypes.greyscale:
        if bit_depth < 8:
            raw = unpack_samples(row, bit_depth, width)
            grey = scale_samples(raw, bit_depth)
        else:
            raw = grey = np.frombuffer(bytes(row), dtype=dtype)[:width]

        if transparency is None:
            return grey.astype(dtype).tobytes()

        (transparent_grey,) = np.frombuffer(bytes(transparency), dtype=">u2")
        alpha = transparency_alpha(raw == transparent_grey, dtype)
        return np.stack([grey, alpha], axis=1).astype(dtype).tobytes()

    elif color_type == PngColorTypes.truecolor:
        if transparency is None:
            return bytes(row)

        pixels = np.frombuffer(bytes(row), dtype=dtype).reshape(width, 3)
        transparent_rgb = np.frombuffer(bytes(transparency), dtype=">u2")
        alpha = transparency_alpha(np.all(pixels == transparent_rgb, axis=1), dtype)
        return np.column_stack([pixels, alpha]).astype(dtype).tobytes()

    else:
        # Alpha already present
        return bytes(row)
