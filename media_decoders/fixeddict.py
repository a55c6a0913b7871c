r"""
The :py:mod:`media_decoders.fixeddict` module provides the
:py:func:`fixeddict` function for creating :py:class:`dict` subclasses which
permit only a fixed set of keys. All of the header and result structures in
this package are fixeddicts. Compared with plain dictionaries they add:

* Explicitness -- each structure has a name and a documented list of fields.
* Avoidance of typos -- misspelt key names raise a
  :py:exc:`FixedDictKeyError`.
* Pretty printing -- fields can be given custom string formatters (see
  :py:mod:`media_decoders.string_formatters`).

For example::

    >>> from media_decoders.fixeddict import fixeddict, Entry
    >>> from media_decoders.string_formatters import Hex

    >>> Chunk = fixeddict(
    ...     "Chunk",
    ...     Entry("chunk_type"),
    ...     Entry("length", formatter=Hex(8)),
    ... )
    >>> c = Chunk(chunk_type="IDAT", length=0x2000)
    >>> print(c)
    Chunk:
      chunk_type: IDAT
      length: 0x00002000
    >>> c["lenght"] = 10
    Traceback (most recent call last):
      ...
    FixedDictKeyError: 'lenght' not allowed in Chunk

Entries whose names begin with an underscore are omitted when printing.

.. autofunction:: fixeddict

.. autoclass:: Entry

.. autoexception:: FixedDictKeyError
"""

import sys

from collections import OrderedDict

from textwrap import dedent

from media_decoders.string_utils import indent


__all__ = [
    "fixeddict",
    "Entry",
    "FixedDictKeyError",
]


class Entry(object):
    """
    Defines the properties of an entry in a :py:func:`fixeddict` dictionary.

    Parameters
    ==========
    name : str
        The name of this entry in the dictionary.
    formatter : function(value) -> string
        Converts a value into the string shown when printing. Defaults to
        'str'.
    enum : :py:class:`~enum.Enum`
        If given, values which are members of this enum are shown by name
        followed by the (formatted) value in brackets.
    help : str
        Optional documentation string.
    """

    def __init__(self, name, formatter=str, enum=None, help=None):
        self.name = name
        self.formatter = formatter
        self.enum = enum
        self.help = dedent(help).strip() if help is not None else None

    def to_string(self, value):
        """
        Convert a value to a string according to this :py:class:`Entry`.
        """
        value_string = self.formatter(value)

        if self.enum is not None:
            try:
                value_string = "{} ({})".format(self.enum(value).name, value_string)
            except ValueError:
                pass

        return value_string


class FixedDictKeyError(KeyError):
    """
    A :py:exc:`KeyError` which also records the :py:func:`fixeddict` type
    which refused the key.

    Attributes
    ==========
    key
        The key which was accessed.
    fixeddict_class
        The fixeddict type of the dictionary used.
    """

    def __init__(self, key, fixeddict_class):
        super(FixedDictKeyError, self).__init__(key)
        self.key = key
        self.fixeddict_class = fixeddict_class

    def __str__(self):
        return "{!r} not allowed in {}".format(self.key, self.fixeddict_class.__name__)


def fixeddict(name, *entries, **kwargs):
    """
    Create a fixed-entry dictionary type.

    The first argument is the name of the created class, the remaining
    arguments may be strings or :py:class:`Entry` instances describing the
    allowed entries in the dictionary.

    The keyword-only argument 'help' sets the docstring of the returned
    class; the list of entries (and their help strings) is appended to it.

    The class has a read-only attribute ``entry_objs``: an
    :py:class:`~collections.OrderedDict` mapping from entry name to
    :py:class:`Entry`.
    """
    help = kwargs.pop("help", None)
    assert not kwargs, "Got unexpected keyword arguments: {}".format(", ".join(kwargs))

    entry_objs = OrderedDict(
        (entry.name, entry)
        for entry in (arg if isinstance(arg, Entry) else Entry(arg) for arg in entries)
    )

    def check_key(self, key):
        if key not in entry_objs:
            raise FixedDictKeyError(key, self.__class__)

    def __init__(self, *args, **kwargs):
        dict.__init__(self, *args, **kwargs)
        for key in self.keys():
            check_key(self, key)

    def __setitem__(self, key, value):
        check_key(self, key)
        dict.__setitem__(self, key, value)

    def setdefault(self, key, value=None):
        check_key(self, key)
        return dict.setdefault(self, key, value)

    def update(self, E=None, **F):
        if E is not None:
            items = E.items() if hasattr(E, "keys") else E
            for k, v in items:
                self[k] = v
        for k, v in F.items():
            self[k] = v

    def copy(self):
        return self.__class__(self)

    def __repr__(self):
        return "{}({{{}}})".format(
            self.__class__.__name__,
            ", ".join(
                "{!r}: {!r}".format(key, self[key]) for key in entry_objs if key in self
            ),
        )

    def __str__(self):
        lines = [
            indent("{}: {}".format(key, entry.to_string(self[key])))
            for key, entry in entry_objs.items()
            if key in self and not key.startswith("_")
        ]
        if lines:
            return "{}:\n{}".format(self.__class__.__name__, "\n".join(lines))
        else:
            return self.__class__.__name__

    doc = dedent(help).strip() if help is not None else "A fixeddict."
    doc += "\n\nParameters\n==========\n" + "\n".join(
        entry.name + (("\n" + indent(entry.help, "    ")) if entry.help else "")
        for entry in entry_objs.values()
    )

    cls = type(
        name,
        (dict,),
        {
            "__init__": __init__,
            "__setitem__": __setitem__,
            "setdefault": setdefault,
            "update": update,
            "copy": copy,
            "__repr__": __repr__,
            "__str__": __str__,
            "__doc__": doc,
            "entry_objs": entry_objs,
        },
    )

    # Report the caller's module as this type's home (as enum.Enum does)
    try:
        cls.__module__ = sys._getframe(1).f_globals["__name__"]
    except (AttributeError, ValueError, KeyError):
        pass

    return cls
