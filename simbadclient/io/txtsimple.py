# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
A parser for the plain text written by FORMAT_TXT_SIMPLE_BASIC (or
something similar).

A line consisting of dashes only starts a new object.  Other non-blank
lines look like ``name: data`` and become an entry of the current
object.  If the data ends with a comma it holds several items, and the
entry is a list of them.
"""

__all__ = ["parse_txt_simple"]

import re

_line_sep = re.compile(r"\s*\n")
_name_sep = re.compile(r":\s*")
_object_sep = re.compile(r"^-+$")


def parse_txt_simple(text):
    """
    parse text into a list of dictionaries, one per object.

    Lines seen before the first separator line are not part of any
    returned object.

    Only the first colon of a line separates the name from the data, so
    ``ra: 12:34:56`` gives ``{"ra": "12:34:56"}``; the rest of the line is
    not cut at later colons.
    """
    obj = {}
    data = []
    for line in _line_sep.split(text):
        if not line:
            continue
        if _object_sep.match(line):
            obj = {}
            data.append(obj)
            continue

        parts = _name_sep.split(line, maxsplit=1)
        name = parts[0]
        value = parts[1] if len(parts) > 1 and parts[1] else None
        if value is not None and value.endswith(","):
            value = value[:-1].split(",") if len(value) > 1 else []
        obj[name] = value
    return data
