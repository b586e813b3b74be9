# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
A minimal VOTable reader for SIMBAD responses.

This is *not* a full VOTable parser.  It is oriented toward returning
the contents of TABLEDATA sections and the metadata that can reasonably
be associated with them.  Any relationship of tables to resources is
lost: the result of parse_vo_table() is a flat list of Table instances,
one per TABLE element, in document order.

Each Table carries

  * ``metadata``: a header Node with the TABLE tag and attributes (and
    no children), then every child element of the TABLE other than DATA
    (FIELDs, DESCRIPTION, PARAMs, ...) as Node instances, in document
    order.
  * ``rows``: one tuple of Cell per TR.  A Cell's ``value`` is the text
    of the TD, with None for the SIMBAD null marker ``~``; its ``meta``
    is the FIELD Node in the same position.

All values are returned as provided by the XML parser; datatype and
arraysize attributes are not interpreted.

The input may hold several concatenated XML documents; it is split
before every XML declaration and each piece is parsed on its own.
"""

__all__ = [
    "Node", "Cell", "Table", "VOTableHandler", "strip_empty",
    "split_fragments", "parse_vo_table"]

import logging
import re
from collections import namedtuple

from astropy import units as u
from astropy.table import Table as AstropyTable, MaskedColumn

from ..exceptions import StructuralError
from .plainxml import get_backend, make_backend

log = logging.getLogger(__name__)

NULL_VALUE = "~"


class Node:
    """
    an XML element as seen by the parser: a tag, its attributes and its
    children, which are Node instances or strings, in document order.
    """

    def __init__(self, tag, attrs=None, children=None):
        self.tag = tag
        self.attrs = dict(attrs or {})
        self.children = list(children or [])

    def __repr__(self):
        return "<Node {} {!r} ({} children)>".format(
            self.tag, self.attrs, len(self.children))

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (self.tag == other.tag and self.attrs == other.attrs and
                self.children == other.children)

    def get(self, name, default=None):
        """
        return the value of the named attribute
        """
        return self.attrs.get(name, default)

    @property
    def text(self):
        """
        the concatenation of the text children of this node
        """
        return "".join(
            child for child in self.children if isinstance(child, str))

    def elements(self):
        """
        iterate over the child elements, skipping text
        """
        return (child for child in self.children if isinstance(child, Node))

    def findall(self, tag):
        """
        return the child elements with the given tag
        """
        return [child for child in self.elements() if child.tag == tag]

    def find(self, tag):
        """
        return the first child element with the given tag, or None
        """
        for child in self.elements():
            if child.tag == tag:
                return child
        return None


class Cell(namedtuple("Cell", ["value", "meta"])):
    """
    a single datum of a table.

    Attributes
    ----------
    value : str
       the text of the TD element; None if it was the null marker ``~``
    meta : Node
       the FIELD describing this datum, or None if the row has more cells
       than the table has FIELDs
    """
    __slots__ = ()

    @property
    def name(self):
        """
        the name of the FIELD describing this cell
        """
        if self.meta is None:
            return None
        return self.meta.get("name")


class Table:
    """
    the data and metadata of one TABLE element
    """

    def __init__(self, metadata, rows, fields=()):
        self._metadata = tuple(metadata)
        self._rows = tuple(tuple(row) for row in rows)
        self._fields = tuple(fields)

    def __repr__(self):
        return "<Table {!r}: {} fields, {} rows>".format(
            self.name, len(self._fields), len(self._rows))

    @property
    def metadata(self):
        """
        a header Node holding the TABLE tag and attributes, then the
        non-data child elements of the TABLE in document order
        """
        return self._metadata

    @property
    def rows(self):
        """
        the rows of the table, each a tuple of Cell
        """
        return self._rows

    @property
    def tag(self):
        return self._metadata[0].tag

    @property
    def attrs(self):
        return self._metadata[0].attrs

    @property
    def name(self):
        return self.attrs.get("name")

    @property
    def fields(self):
        """
        the FIELD elements of the table, in column order
        """
        return self._fields

    @property
    def fieldnames(self):
        return [field.get("name") for field in self._fields]

    @property
    def description(self):
        """
        the text of the DESCRIPTION element of the table, or None
        """
        for item in self._metadata[1:]:
            if item.tag == "DESCRIPTION":
                return item.text.strip()
        return None

    def __len__(self):
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)

    def __getitem__(self, index):
        return self._rows[index]

    def to_table(self):
        """
        return the rows as an astropy Table of string columns, with null
        values masked.  A column is named after its FIELD's name, or its ID
        when the name is missing or already taken, or else ``col<n>``;
        columns beyond the declared FIELDs are named ``col<n>``.
        """
        ncols = max([len(self._fields)] + [len(row) for row in self._rows])
        columns = []
        used = set()
        for index in range(ncols):
            field = self._fields[index] if index < len(self._fields) else None
            values = []
            for row in self._rows:
                values.append(row[index].value if index < len(row) else None)

            names = []
            unit = None
            description = None
            if field is not None:
                names = [field.get("name"), field.get("ID")]
                if field.get("unit"):
                    unit = u.Unit(field.get("unit"), parse_strict="silent")
                descnode = field.find("DESCRIPTION")
                if descnode is not None:
                    description = descnode.text.strip()

            name = next((n for n in names if n and n not in used),
                        "col{}".format(index))
            if name in used:
                name = "{}_{}".format(name, index)
            used.add(name)

            columns.append(MaskedColumn(
                data=[value if value is not None else "" for value in values],
                mask=[value is None for value in values],
                name=name,
                dtype=str, unit=unit, description=description))

        return AstropyTable(columns, meta=dict(self.attrs))


def strip_empty(nodes):
    """
    remove, in place, the whitespace-only text children from each of the
    given nodes and all their descendants.
    """
    for node in nodes:
        if isinstance(node, Node):
            node.children[:] = [
                child for child in node.children
                if not isinstance(child, str) or child.strip()]
            strip_empty(node.children)


class VOTableHandler:
    """
    a listener (see simbadclient.io.plainxml) that builds Node trees and
    turns every TABLE into a Table as soon as it closes.

    The handler holds the stack of open elements; its bottom is a
    synthetic root that is there from start_document() to end_document().
    """
    table_tag = "TABLE"
    field_tag = "FIELD"
    data_tag = "DATA"
    tabledata_tag = "TABLEDATA"
    row_tag = "TR"
    cell_tag = "TD"

    def __init__(self):
        self.root = None
        self.stack = []
        self.tables = []
        self.to_strip = []

    def start_document(self):
        self.root = Node(None)
        self.stack = [self.root]
        self.tables = []
        self.to_strip = []

    def start_element(self, name, attrs):
        if not self.stack:
            raise StructuralError(
                "Start tag <{}> outside of a document".format(name))
        element = Node(name, attrs)
        self.stack[-1].children.append(element)
        self.stack.append(element)

    def characters(self, text):
        if self.stack:
            self.stack[-1].children.append(text)

    def end_element(self, name):
        if len(self.stack) < 2:
            raise StructuralError("Unmatched end tag </{}>".format(name))
        if name != self.stack[-1].tag:
            raise StructuralError(
                "End tag </{}> does not match start tag <{}>".format(
                    name, self.stack[-1].tag))

        element = self.stack.pop()
        if element.tag == self.table_tag:
            self.tables.append(self._extract_table(element))

    def end_document(self):
        if len(self.stack) > 1:
            raise StructuralError("Missing end tags")
        self.stack = []
        strip_empty(self.to_strip)
        return self.tables

    def _extract_table(self, element):
        fields = []
        descr = []
        rows = []
        for child in element.elements():
            if child.tag == self.field_tag:
                fields.append(child)
                descr.append(child)
            elif child.tag == self.data_tag:
                rows.extend(self._read_rows(child))
            else:
                descr.append(child)

        self.to_strip.extend(descr)
        return Table(
            [Node(element.tag, element.attrs)] + descr,
            [self._make_row(row, fields) for row in rows],
            fields)

    def _read_rows(self, data):
        for tabledata in data.findall(self.tabledata_tag):
            for tr in tabledata.findall(self.row_tag):
                yield [td.text for td in tr.findall(self.cell_tag)]

    @staticmethod
    def _make_row(values, fields):
        row = []
        for index, value in enumerate(values):
            meta = fields[index] if index < len(fields) else None
            row.append(Cell(None if value == NULL_VALUE else value, meta))
        return row


_fragment_start = re.compile(r"(?=<\?xml\s)")
_fragment_start_bytes = re.compile(rb"(?=<\?xml\s)")


def split_fragments(data):
    """
    split data (str or bytes) before each XML declaration, dropping empty
    pieces
    """
    pattern = _fragment_start_bytes if isinstance(data, bytes) \
        else _fragment_start
    return [frag for frag in pattern.split(data) if frag.strip()]


def parse_vo_table(data, backend=None):
    """
    parse SIMBAD VOTable output into a list of Table instances.

    Parameters
    ----------
    data : str or bytes
       the text to parse.  It may contain several XML documents one
       after the other, each introduced by its XML declaration.  Bytes
       are decoded by the XML parser, fragment by fragment, following
       each document's own encoding declaration (UTF-8 if there is
       none).
    backend : str
       the name of the XML backend to use ("expat" or "sax"); by default
       the process-wide selection is used.

    Returns
    -------
    list of Table
       the tables of all documents, in input order

    Raises
    ------
    StructuralError
       if a document is not well-formed, or its bytes do not match its
       declared encoding
    BackendUnavailableError
       if no XML backend can be set up
    """
    if backend is None:
        backend = get_backend()
    elif isinstance(backend, str):
        backend = make_backend(backend)

    tables = []
    fragments = split_fragments(data)
    for index, fragment in enumerate(fragments):
        tables.extend(backend.parse(
            fragment, VOTableHandler(),
            source_name="fragment {}".format(index + 1)))
    log.debug("%d tables read from %d documents", len(tables), len(fragments))
    return tables
