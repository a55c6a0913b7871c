r"""
The :py:mod:`media_decoders.string_formatters` module contains 'string
formatters': callables which take a value and return a string representation
of it. They are used by :py:mod:`~media_decoders.fixeddict` types to pretty
print header and result structures. For example::

    >>> from media_decoders.string_formatters import Hex

    >>> hex32_formatter = Hex(8)
    >>> hex32_formatter(0xFF00)
    '0x0000FF00'

"""

__all__ = [
    "Number",
    "Hex",
    "Dec",
    "Bytes",
    "FourCC",
    "Flags",
    "Object",
]


class Number(object):
    """
    A formatter which uses :py:meth:`str.format` to format integers.

    Parameters
    ==========
    format_code : str
        A python :py:meth:`str.format` code, e.g. "X" for hexadecimal.
    num_digits : int
        The length to pad the number to.
    pad_digit : str
        The value to use to pad absent digits
    prefix : str
        A prefix to add before the formatted number
    """

    def __init__(self, format_code, num_digits=0, pad_digit="0", prefix=""):
        self.format_code = format_code
        self.num_digits = num_digits
        self.pad_digit = pad_digit
        self.prefix = prefix

    def __call__(self, number):
        return "{}{}{:{}{}{}}".format(
            "-" if number < 0 else "",
            self.prefix,
            abs(number),
            self.pad_digit,
            self.num_digits,
            self.format_code,
        )


class Hex(Number):
    """Prints numbers in hexadecimal (with a '0x' prefix by default)."""

    def __init__(self, num_digits=0, pad_digit="0", prefix="0x"):
        super(Hex, self).__init__("X", num_digits, pad_digit, prefix)


class Dec(Number):
    """Prints numbers in decimal."""

    def __init__(self, num_digits=0, pad_digit="0", prefix=""):
        super(Dec, self).__init__("d", num_digits, pad_digit, prefix)


class Bytes(object):
    """
    A formatter for :py:class:`bytes` strings. Shows the value as a string of
    the form '0xAB_CD_EF'. Values longer than ``max_bytes`` are shortened by
    showing only their first and last few bytes, with the length appended::

        >>> Bytes()(b"\x00\x11\x22")
        '0x00_11_22'
        >>> Bytes(max_bytes=4)(bytes(range(10)))
        '0x00_01...08_09 (10 bytes)'

    Parameters
    ==========
    prefix : str
        A prefix to add to the string
    separator : str
        A string to place between each pair of hex digits.
    max_bytes : int
        The maximum number of bytes to show in full.
    """

    def __init__(self, prefix="0x", separator="_", max_bytes=16):
        self.prefix = prefix
        self.separator = separator
        self.max_bytes = max_bytes

    def _hex(self, b):
        return self.separator.join("{:02X}".format(n) for n in bytearray(b))

    def __call__(self, b):
        if len(b) <= self.max_bytes:
            return "{}{}".format(self.prefix, self._hex(b))

        context = max(1, self.max_bytes // 2)
        return "{}{}...{} ({} bytes)".format(
            self.prefix,
            self._hex(b[:context]),
            self._hex(b[-context:]),
            len(b),
        )


class FourCC(object):
    """
    A formatter for four character codes (e.g. PNG chunk types or DDS
    compression tags) given as :py:class:`bytes`. Printable codes are shown
    quoted, anything else is shown as hex::

        >>> FourCC()(b"DXT1")
        "'DXT1'"
        >>> FourCC()(b"\x00\x00\x00\x00")
        '0x00000000'
    """

    def __call__(self, code):
        if code is None:
            return "None"
        code = bytes(code)
        if all(0x20 <= c < 0x7F for c in bytearray(code)):
            return repr(code.decode("ascii"))
        else:
            return "0x{}".format("".join("{:02X}".format(c) for c in bytearray(code)))


class Flags(object):
    """
    A formatter for bit-field integers whose individual bits are named by an
    :py:class:`~enum.IntEnum`. Shows the hex value followed by the names of
    the set bits::

        >>> Flags(DdsPixelFormatFlags)(0x41)
        '0x00000041 (alpha_pixels | rgb)'

    Bits with no name in the enum are shown as a residual hex value.
    """

    def __init__(self, flag_enum, num_digits=8):
        self.flag_enum = flag_enum
        self.hex = Hex(num_digits)

    def __call__(self, value):
        names = []
        remaining = value
        for flag in self.flag_enum:
            if value & flag:
                names.append(flag.name)
                remaining &= ~flag
        if remaining:
            names.append(Hex()(remaining))

        if names:
            return "{} ({})".format(self.hex(value), " | ".join(names))
        else:
            return self.hex(value)


class Object(object):
    """
    A formatter for opaque python Objects. Shows only the object type name.
    """

    def __init__(self, prefix="<", suffix=">"):
        self.prefix = prefix
        self.suffix = suffix

    def __call__(self, o):
        return "{}{}{}".format(
            self.prefix,
            type(o).__name__,
            self.suffix,
        )
