"""
The :py:mod:`media_decoders.string_utils` module contains the small set of
string formatting routines used to print structures and error explanations.
"""

from textwrap import wrap, dedent

import re


__all__ = [
    "indent",
    "split_into_paragraphs",
    "wrap_paragraphs",
]


def indent(text, prefix="  "):
    """
    Indent every line of the string 'text' with the prefix string 'prefix'.

    Unlike :py:func:`textwrap.indent`, blank lines are indented too.
    """
    return "{}{}".format(prefix, ("\n{}".format(prefix)).join(text.split("\n")))


RE_INDENTED = re.compile(r"^\s+\S")


def split_into_paragraphs(text):
    """
    Deindent a hard-line-wrapped, markdown-style string and split it into a
    list of ``(indentation, text)`` pairs, one per paragraph.

    Paragraphs are separated by blank lines. Ordinary paragraphs have their
    line breaks removed and an empty indentation string. Lines which remain
    indented after deindentation (e.g. example command lines) are each
    returned as their own paragraph with their indentation preserved so that
    they are never re-wrapped.
    """
    paragraphs = []
    current = None

    for line in dedent(text).splitlines():
        if line.strip() == "":
            current = None
            if paragraphs and paragraphs[-1] is not None:
                paragraphs.append(None)
        elif RE_INDENTED.match(line):
            current = None
            stripped = line.lstrip()
            paragraphs.append((line[: len(line) - len(stripped)], stripped.rstrip()))
        elif current is None:
            current = ["", line.strip()]
            paragraphs.append(current)
        else:
            current[1] += " " + line.strip()

    # Strip the trailing separator
    while paragraphs and paragraphs[-1] is None:
        paragraphs.pop()

    return [tuple(p) if p is not None else None for p in paragraphs]


def wrap_paragraphs(text, width=None):
    """
    Re-line-wrap a markdown-style string with hard-line-wrapped paragraphs
    (see :py:func:`split_into_paragraphs`).

    Paragraphs are separated by a single blank line in the output. If 'width'
    is None, each paragraph is placed on a single line.
    """
    out = []
    for paragraph in split_into_paragraphs(text):
        if paragraph is None:
            out.append("")
        else:
            prefix, body = paragraph
            if width is None or prefix:
                out.append(prefix + body)
            else:
                out.extend(wrap(body, width))
    return "\n".join(out)
