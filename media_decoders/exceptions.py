"""
Exception types raised when this library is used incorrectly. Errors in the
files being decoded are reported using the
:py:exc:`~media_decoders.decoder.exceptions.DecodeError` hierarchy instead.
"""


class UnknownAssetTypeError(ValueError):
    """
    Thrown by :py:class:`~media_decoders.loader.AssetManager` when no loader
    is registered for the extension of a requested asset.
    """


class AssetNotFoundError(KeyError):
    """
    Thrown by :py:class:`~media_decoders.loader.AssetManager` when a requested
    asset file does not exist.
    """
