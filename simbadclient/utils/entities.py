# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
SIMBAD escapes some entities twice (``&amp;lt;`` for ``&lt;``); this
undoes the outer level.
"""
import re

__all__ = ["decode_double_encoded_entities"]

_double_encoded = re.compile(r"&amp;(#\d+|#[xX][0-9a-fA-F]+|[A-Za-z]\w*);")


def decode_double_encoded_entities(text):
    """
    return text with every double-encoded entity reference turned back
    into a single-encoded one.  Other text is left alone.
    """
    if not text:
        return text
    return _double_encoded.sub(r"&\1;", text)
