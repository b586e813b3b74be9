# Licensed under a 3-clause BSD style license - see LICENSE.rst

"""
simbadclient fetches astronomical data from version 4 of the SIMBAD
database at CDS.

The package provides:

* a client for the three SIMBAD query interfaces

  *  SimbadClient.url_query(), SimbadClient.script(),
     SimbadClient.query()

* parsers for SIMBAD output

  *  parse_vo_table(), parse_txt_simple()

This module also exposes the exception classes raised by the above, of
which SimbadAccessError is the root parent exception.
"""

from .version import version as __version__
from .client import SimbadClient, set_default_server
from .io import parse_vo_table, parse_txt_simple
from .exceptions import (
    SimbadAccessError, SimbadFormatError,
    SimbadServiceError, SimbadQueryError, StructuralError,
    BackendUnavailableError, SimbadAttributeError)
