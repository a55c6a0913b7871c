r"""
.. _media-asset-validator:

``media-asset-validator``
=========================

A command-line utility for checking that a WAVE, PNG or DDS file can be
decoded and, optionally, dumping the decoded payloads for inspection.

Usage
-----

This command should be passed the filename of the asset to check. The file
type is taken from the file extension unless given with ``--type``. For
example, given a valid texture::

    $ media-asset-validator stone.dds --output stone_%d.raw
    level 0: 64x64x1 rgba_dxt5 (4096 bytes)
    level 1: 32x32x1 rgba_dxt5 (1024 bytes)
    ...
    No errors found in dds file.

Here the ``--output`` argument specifies the printf-style template for the
decoded payload filenames. Payloads are written as raw files (see
:py:mod:`media_decoders.file_format`).

If the file cannot be decoded, a detailed explanation of the problem is
displayed::

    $ media-asset-validator broken.png
    Decode error at byte offset 33
    ==============================

    PNG color type 5 is not supported.


    Details
    -------

    Supported color types are: greyscale (0), truecolor (2), indexed (3),
    greyscale alpha (4), truecolor alpha (6).

    media-asset-validator: error: invalid asset (see above)

The exit status is 0 if the file was decoded successfully, 1 if the file
could not be read (or its type is unknown), 2 if the file could not be
decoded and 3 in the event of an internal error.


Arguments
---------

The complete set of arguments can be listed using ``--help``
"""

import os
import sys
import shutil
import logging
import traceback

from argparse import ArgumentParser

from media_decoders import __version__

from media_decoders.string_utils import wrap_paragraphs

from media_decoders.file_format import write_image, write_audio

from media_decoders.assets import DecodedAudio

from media_decoders.tables import AudioFormats, ImageFormats

from media_decoders.decoder import (
    decode_wave,
    decode_png,
    decode_dds,
    DecodeError,
    TruncatedStream,
)


ASSET_TYPES_BY_EXTENSION = {
    ".wav": "wav",
    ".wave": "wav",
    ".png": "png",
    ".dds": "dds",
}
"""Lookup from (lower case) file extension to asset type name."""


def decode_asset(asset_type, f):
    """
    Decode the file 'f' as the named asset type, returning a list of decoded
    payloads (:py:class:`~media_decoders.assets.DecodedImage` or
    :py:class:`~media_decoders.assets.DecodedAudio`).
    """
    if asset_type == "wav":
        return [decode_wave(f)]
    elif asset_type == "png":
        return [decode_png(f)]
    elif asset_type == "dds":
        return decode_dds(f)
    else:
        raise ValueError(asset_type)


def summarise_payload(payload):
    """Return a one-line description of a decoded payload."""
    if isinstance(payload, DecodedAudio):
        return "{} audio, {} Hz, {} frames ({} bytes)".format(
            AudioFormats(payload["format"]).name,
            payload["sample_rate"],
            payload["frames"],
            len(payload["data"]),
        )
    else:
        return "level {}: {}x{}x{} {} ({} bytes)".format(
            payload["level"],
            payload["width"],
            payload["height"],
            payload["depth"],
            ImageFormats(payload["format"]).name,
            len(payload["data"]),
        )


class AssetValidator(object):
    def __init__(self, filename, asset_type, show_status, verbose, output_filename):
        """
        Parameters
        ==========
        filename : str
            The asset filename to read from.
        asset_type : str or None
            One of "wav", "png" or "dds". If None, determined from the
            filename's extension.
        show_status : bool
            If True, show a status line indicating progress.
        verbose : int
            If >=1, show Python stack traces on failure.
        output_filename : str or None
            If not None, a filename pattern for decoded payload files. Should
            contain a printf-style format string (e.g. "payload_%d.raw").
        """
        self._filename = filename
        self._asset_type = asset_type
        self._show_status = show_status
        self._verbose = verbose
        self._output_filename = output_filename

        # Is the status line currently visible
        self._status_line_visible = False

    def run(self):
        asset_type = self._asset_type
        if asset_type is None:
            extension = os.path.splitext(self._filename)[1].lower()
            asset_type = ASSET_TYPES_BY_EXTENSION.get(extension)
            if asset_type is None:
                self._print_error(
                    "cannot determine asset type of {!r} (use --type)".format(
                        self._filename
                    )
                )
                return 1

        try:
            self._file = open(self._filename, "rb")
            self._filesize_bytes = os.path.getsize(self._filename)
        except OSError as e:
            self._print_error(str(e))
            return 1

        try:
            return self._validate(asset_type)
        finally:
            self._file.close()

    def _validate(self, asset_type):
        if self._show_status:
            self._update_status_line("Decoding {} file...".format(asset_type))

        try:
            payloads = decode_asset(asset_type, self._file)

            for index, payload in enumerate(payloads):
                self._hide_status_line()
                print(summarise_payload(payload))
                if self._output_filename is not None:
                    self._output_payload(index, payload)
        except DecodeError as e:
            self._hide_status_line()
            self._print_decode_error(e)
            self._print_error("invalid asset (see above)")
            return 2
        except Exception as e:
            # Internal error (shouldn't happen(!))
            self._hide_status_line()
            self._print_error(
                "internal error in asset validator: {}: {} "
                "(probably a bug in this program)".format(
                    type(e).__name__,
                    str(e),
                )
            )
            return 3

        self._hide_status_line()
        print("No errors found in {} file.".format(asset_type))
        return 0

    def _output_payload(self, index, payload):
        filename = self._output_filename % (index,)

        if isinstance(payload, DecodedAudio):
            write_audio(payload, filename)
        else:
            write_image(payload, filename)

        if self._show_status:
            self._update_status_line("Decoded payload written to {}".format(filename))

    def _tell(self):
        try:
            return self._file.tell()
        except (OSError, ValueError):
            return None

    def _update_status_line(self, message):
        """
        Display/update the status line indicating the progress of the decoding
        process.
        """
        self._status_line_visible = True

        percent = int(
            round(((self._tell() or 0) * 100.0) / (self._filesize_bytes or 1))
        )

        line = "[{:3d}%] {}".format(percent, message)

        # Ensure stdout is fully displayed before doing anything to the status
        # line.
        sys.stdout.flush()

        sys.stderr.write(
            (
                "\033[2K"  # Clear to end of line
                "\033[s"  # Save cursor position
                "{}"
                "\033[u"  # Restore cursor position
            ).format(line)
        )
        sys.stderr.flush()

    def _hide_status_line(self):
        """If the status line is visible, hide it."""
        if self._status_line_visible:
            self._status_line_visible = False

            sys.stdout.flush()

            sys.stderr.write("\033[2K")  # Clear to end of line
            sys.stderr.flush()

    def _print_decode_error(self, exception):
        """
        Display detailed information from a DecodeError on stdout.
        """
        terminal_width = shutil.get_terminal_size()[0]

        summary, _, details = wrap_paragraphs(exception.explain()).partition("\n")

        offset = None
        if isinstance(exception, TruncatedStream):
            offset = exception.offset
        if offset is None:
            offset = self._tell()

        if offset is not None:
            title = "Decode error at byte offset {}".format(offset)
        else:
            title = "Decode error"

        out = ""

        out += title + "\n"
        out += ("=" * len(title)) + "\n"
        out += "\n"
        out += wrap_paragraphs(summary, terminal_width) + "\n"
        if details.strip():
            out += "\n"
            out += "\n"
            out += "Details\n"
            out += "-------\n"
            out += "\n"
            out += wrap_paragraphs(details, terminal_width) + "\n"

        print(out)

    def _print_error(self, message):
        """
        Print an error message to stderr.
        """
        # Avoid interleaving with stdout (and make causality clearer)
        sys.stdout.flush()

        # Display the traceback
        if self._verbose >= 1:
            if sys.exc_info()[0] is not None:
                traceback.print_exc()

        # Display the message
        prog = os.path.basename(sys.argv[0])
        message = "{}: error: {}".format(prog, message)
        sys.stderr.write("{}\n".format(message))


def parse_args(*args, **kwargs):
    """
    Parse a set of command line arguments. Returns a :py:mod:`argparse`
    ``args`` object with the following fields:

    * filename (str): The filename of the asset to read
    * type (str or None): The asset type, if given explicitly.
    * no_status (bool): True if the status line is to be hidden.
    * verbose (int): The verbosity level.
    * output (str or None): The output payload filename pattern.
    """
    parser = ArgumentParser(
        description="""
        Check that a WAVE, PNG or DDS file can be decoded and optionally dump
        the decoded payloads.
    """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    parser.add_argument(
        "filename",
        help="""
            The filename of the asset to validate.
        """,
    )

    parser.add_argument(
        "--type",
        "-t",
        choices=sorted(set(ASSET_TYPES_BY_EXTENSION.values())),
        default=None,
        help="""
            The type of the asset. If not given, the type is determined from
            the file extension.
        """,
    )

    parser.add_argument(
        "--no-status",
        "--quiet",
        "-q",
        action="store_true",
        default=False,
        help="""
            Do not display a status line on stderr while decoding.
        """,
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="""
            Show full Python stack-traces on failure and log the decoded
            headers.
        """,
    )

    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="""
            If given, the filename pattern for decoded payload data and
            metadata. The supplied pattern should a 'printf' style template
            with (e.g.) '%%d' where an index will be substituted: '0' for the
            first decoded payload (i.e. the audio, the image or the first mip
            level), '1' for the second and so on. The file extension supplied
            will be stripped and two files will be written for each payload:
            a '.raw' file and a '.json' JSON metadata file.
        """,
    )

    args = parser.parse_args(*args, **kwargs)

    if args.output is not None:
        try:
            args.output % (0,)
        except TypeError as e:
            parser.error("--output is not a valid printf template: {}".format(e))

    return args


def main(*args, **kwargs):
    args = parse_args(*args, **kwargs)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    validator = AssetValidator(
        filename=args.filename,
        asset_type=args.type,
        show_status=not args.no_status,
        verbose=args.verbose,
        output_filename=args.output,
    )
    return validator.run()


if __name__ == "__main__":
    sys.exit(main())
