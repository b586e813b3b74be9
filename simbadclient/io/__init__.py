# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Parsers for SIMBAD query output.
"""
from .votable import parse_vo_table, Table, Cell, Node
from .txtsimple import parse_txt_simple
from .plainxml import get_backend, select_backend

__all__ = ["parse_vo_table", "parse_txt_simple", "Table", "Cell", "Node",
           "get_backend", "select_backend"]
