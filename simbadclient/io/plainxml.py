# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Some XML hacks.

The parsers in this package do not build element trees through a third
party library; instead they listen to start, data, and end events and
build just what they need.  This module provides the event sources
("backends") that drive such listeners.

A listener is any object with the methods::

    start_document()
    start_element(name, attrs)
    characters(text)
    end_element(name)
    end_document()

end_document()'s return value is what a backend's parse() returns.

Two backends are known, expat (the push parser of the standard library)
and sax (a defusedxml SAX reader).  The first one that can be set up is
selected on first use and kept for the life of the process; use
select_backend() to force a particular one.
"""

__all__ = [
    "ErrorPosition", "ExpatBackend", "SaxBackend", "get_backend",
    "select_backend", "cleanup_name"]

import io
import logging
from xml.parsers import expat
from xml.sax import SAXParseException
from xml.sax.xmlreader import InputSource
from xml.sax.handler import ContentHandler, feature_namespaces

import defusedxml.sax
from defusedxml import DefusedXmlException

from ..exceptions import (
    BackendUnavailableError, SimbadFormatError, StructuralError)

log = logging.getLogger(__name__)


class ErrorPosition:
    """A wrapper for an error position.

    Construct it with file name, line number, and column.  Use None
    for missing or unknown values.
    """
    fName = None

    def __init__(self, fName, line, column):
        self.line = line or '?'
        self.col = column
        if self.col is None:
            self.col = '?'
        self.fName = fName

    def __str__(self):
        if self.fName:
            return "%s, (%s, %s)" % (self.fName, self.line, self.col)
        else:
            return "(%s, %s)" % (self.line, self.col)


def cleanup_name(name):
    """
    return an element name with any namespace prefix removed.
    """
    return name.split(":")[-1]


class ExpatBackend:
    """
    drives a listener from the expat push parser.
    """
    name = "expat"

    def __init__(self):
        # fails here rather than in the middle of a query if pyexpat
        # cannot be loaded
        expat.ParserCreate()

    def parse(self, text, listener, source_name=None):
        """
        feed text to a fresh expat parser, passing the events to listener.
        Bytes are decoded as the XML declaration says; str is taken as
        already decoded, whatever the declaration says.

        Raises
        ------
        StructuralError
           if expat or the listener finds the document malformed
        """
        parser = expat.ParserCreate()
        parser.buffer_text = True
        parser.StartElementHandler = (
            lambda name, attrs: listener.start_element(
                cleanup_name(name), attrs))
        parser.EndElementHandler = (
            lambda name: listener.end_element(cleanup_name(name)))
        parser.CharacterDataHandler = listener.characters

        listener.start_document()
        try:
            parser.Parse(text, True)
        except expat.ExpatError as ex:
            pos = ErrorPosition(source_name, ex.lineno, ex.offset)
            raise StructuralError(
                "At %s: %s" % (pos, expat.ErrorString(ex.code)), cause=ex)
        return listener.end_document()


class _SaxEventAdapter(ContentHandler):
    """
    translates SAX content handler calls into listener calls.
    """
    def __init__(self, listener):
        ContentHandler.__init__(self)
        self.listener = listener

    def startElement(self, name, attrs):
        self.listener.start_element(cleanup_name(name), dict(attrs.items()))

    def endElement(self, name):
        self.listener.end_element(cleanup_name(name))

    def characters(self, chars):
        self.listener.characters(chars)


class SaxBackend:
    """
    drives a listener from a defusedxml SAX reader.  Entity declarations
    are refused.
    """
    name = "sax"

    def __init__(self):
        defusedxml.sax.make_parser()

    def parse(self, text, listener, source_name=None):
        """
        parse text with a fresh SAX reader, passing the events to listener.
        Bytes are decoded as the XML declaration says; str is read as a
        character stream, whatever the declaration says.

        Raises
        ------
        StructuralError
           if the reader or the listener finds the document malformed
        SimbadFormatError
           if the document uses constructs refused by defusedxml
        """
        reader = defusedxml.sax.make_parser()
        reader.setFeature(feature_namespaces, False)
        reader.setContentHandler(_SaxEventAdapter(listener))
        source = InputSource(source_name)
        if isinstance(text, str):
            source.setCharacterStream(io.StringIO(text))
        else:
            source.setByteStream(io.BytesIO(text))

        listener.start_document()
        try:
            reader.parse(source)
        except SAXParseException as ex:
            pos = ErrorPosition(
                source_name, ex.getLineNumber(), ex.getColumnNumber())
            raise StructuralError(
                "At %s: %s" % (pos, ex.getMessage()), cause=ex)
        except DefusedXmlException as ex:
            raise SimbadFormatError(cause=ex)
        return listener.end_document()


_backends = (ExpatBackend, SaxBackend)
_selected = None


def make_backend(name):
    """
    return a new instance of the named backend without changing the
    process-wide selection.

    Raises
    ------
    BackendUnavailableError
       if the backend cannot be set up
    ValueError
       if name is not a known backend
    """
    for candidate in _backends:
        if candidate.name == name:
            try:
                return candidate()
            except Exception as ex:
                raise BackendUnavailableError(
                    "{}: {}".format(name, ex), url=None) from ex
    raise ValueError("unrecognized XML backend: " + name)


def select_backend(name=None):
    """
    choose the XML backend used by the parsers of this package.

    Parameters
    ----------
    name : str
       "expat" or "sax".  If None, the known backends are tried in order
       and the first one that can be set up is used.

    Returns
    -------
    the selected backend

    Raises
    ------
    BackendUnavailableError
       if the requested backend (or, with no name, every backend)
       cannot be set up
    ValueError
       if name is not a known backend
    """
    global _selected
    if name is not None:
        candidates = [b for b in _backends if b.name == name]
        if not candidates:
            raise ValueError("unrecognized XML backend: " + name)
    else:
        candidates = _backends

    problems = []
    for candidate in candidates:
        try:
            _selected = candidate()
        except Exception as ex:
            problems.append("{}: {}".format(candidate.name, ex))
            continue
        log.debug("using the %s XML backend", _selected.name)
        return _selected

    raise BackendUnavailableError(
        "No XML parsing backend available ({})".format("; ".join(problems)))


def get_backend():
    """
    return the selected XML backend, probing for one on first use.
    """
    if _selected is None:
        return select_backend()
    return _selected
