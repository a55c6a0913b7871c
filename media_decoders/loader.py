"""
The :py:mod:`media_decoders.loader` module provides :py:class:`AssetManager`,
which locates asset files beneath a root directory and loads them using the
decoder registered for their file extension::

    >>> from media_decoders.loader import AssetManager
    >>> from media_decoders.assets import AudioDescriptor

    >>> assets = AssetManager("path/to/assets")
    >>> texture = assets.load_asset("textures/stone.dds")
    >>> print(texture["dimensions"].name, len(texture["images"]))
    texture_2d 9
    >>> music = assets.load_asset("music.wav", AudioDescriptor(streaming=True))
    >>> pcm_stream = music["data"]  # Must be closed by the caller

By default WAVE (.wav, .wave), PNG (.png) and DDS (.dds) files are supported.
Additional loaders may be added with :py:meth:`AssetManager.register_loader`.
A loader is any callable taking a binary file and a (possibly None)
descriptor.

.. autoclass:: AssetManager
    :members:

.. autofunction:: load_wave

.. autofunction:: load_png_texture

.. autofunction:: load_dds_texture
"""

import os
import logging

from media_decoders.tables import (
    PNG_HEIGHT_1D,
    TextureDimensions,
    TextureFilters,
    TextureBorders,
)

from media_decoders.assets import Texture, TextureDescriptor, PcmStream

from media_decoders.exceptions import UnknownAssetTypeError, AssetNotFoundError

from media_decoders.decoder.io import State, init_io

from media_decoders.decoder.wave import decode_wave

from media_decoders.decoder.png import read_png

from media_decoders.decoder.dds import (
    read_dds_header,
    classify_dds_dimensions,
    dds_image_format,
    read_dds_images,
)

__all__ = [
    "AssetManager",
    "load_wave",
    "load_png_texture",
    "load_dds_texture",
]


def default_texture_descriptor():
    return TextureDescriptor(
        filter=TextureFilters.bilinear,
        border_x=TextureBorders.repeat,
        border_y=TextureBorders.repeat,
        border_z=TextureBorders.repeat,
    )


def load_wave(f, descriptor=None):
    """
    Load a WAVE file, returning a
    :py:class:`~media_decoders.assets.DecodedAudio`. See
    :py:func:`~media_decoders.decoder.wave.decode_wave`.
    """
    return decode_wave(f, descriptor)


def load_png_texture(f, descriptor=None):
    """
    Load a PNG file as a 1D or 2D :py:class:`~media_decoders.assets.Texture`
    with a single mip level. The texture is one dimensional if the PNG
    header's height is -1.
    """
    if descriptor is None:
        descriptor = default_texture_descriptor()

    state = State()
    init_io(state, f)
    image = read_png(state)

    if state["header"]["height"] == PNG_HEIGHT_1D:
        dimensions = TextureDimensions.texture_1d
    else:
        dimensions = TextureDimensions.texture_2d

    return Texture(
        dimensions=dimensions,
        images=[image],
        descriptor=descriptor,
    )


def load_dds_texture(f, descriptor=None):
    """
    Load a DDS file as a :py:class:`~media_decoders.assets.Texture` with one
    image per mip level. The texture's dimensions are determined (and cube
    maps rejected) before any pixel data is read.
    """
    if descriptor is None:
        descriptor = default_texture_descriptor()

    state = State()
    init_io(state, f)
    header = read_dds_header(state)
    dimensions = classify_dds_dimensions(header)
    images = read_dds_images(state, header, dds_image_format(header))

    return Texture(
        dimensions=dimensions,
        images=images,
        descriptor=descriptor,
    )


class AssetManager(object):
    """
    Loads assets from files beneath a root directory, choosing a loader
    based on the file extension (case insensitive).

    Parameters
    ==========
    root : str or None
        The directory asset filenames are relative to. If None, filenames are
        used as given.
    """

    def __init__(self, root=None):
        self.root = root
        self._loaders = {}

        self.register_loader(load_wave, ".wav", ".wave")
        self.register_loader(load_png_texture, ".png")
        self.register_loader(load_dds_texture, ".dds")

    @staticmethod
    def _normalise_extension(extension):
        extension = extension.lower()
        if not extension.startswith("."):
            extension = "." + extension
        return extension

    def register_loader(self, loader, *extensions):
        """
        Use 'loader' for files with any of the given extensions (e.g.
        ``".png"``), replacing any loader previously registered for them.
        """
        for extension in extensions:
            self._loaders[self._normalise_extension(extension)] = loader

    def remove_loader(self, *extensions):
        """Stop loading files with the given extensions."""
        for extension in extensions:
            self._loaders.pop(self._normalise_extension(extension), None)

    def get_loader(self, filename):
        """
        Return the loader registered for the extension of 'filename'.

        Raises
        ======
        :py:exc:`~media_decoders.exceptions.UnknownAssetTypeError`
        """
        extension = os.path.splitext(filename)[1].lower()
        try:
            return self._loaders[extension]
        except KeyError:
            raise UnknownAssetTypeError(
                "No loader registered for {!r} files ({})".format(extension, filename)
            )

    def find_asset(self, filename):
        """
        Open the named asset for binary reading.

        Raises
        ======
        :py:exc:`~media_decoders.exceptions.AssetNotFoundError`
        """
        if self.root is not None:
            path = os.path.join(self.root, filename)
        else:
            path = filename

        try:
            return open(path, "rb")
        except FileNotFoundError:
            raise AssetNotFoundError(filename)

    def load_asset(self, filename, descriptor=None):
        """
        Locate, decode and return the named asset.

        The file is closed once loading completes unless the result holds a
        :py:class:`~media_decoders.assets.PcmStream`, which then owns it.

        Raises
        ======
        :py:exc:`~media_decoders.exceptions.UnknownAssetTypeError`
        :py:exc:`~media_decoders.exceptions.AssetNotFoundError`
        :py:exc:`~media_decoders.decoder.exceptions.DecodeError`
        """
        loader = self.get_loader(filename)
        f = self.find_asset(filename)

        logging.debug("load_asset: loading %s using %r", filename, loader)

        streaming = False
        try:
            asset = loader(f, descriptor)
            streaming = isinstance(asset, dict) and isinstance(
                asset.get("data"), PcmStream
            )
        finally:
            if not streaming:
                f.close()

        return asset
