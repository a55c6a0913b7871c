"""
Command line tools provided by :py:mod:`media_decoders`.
"""
