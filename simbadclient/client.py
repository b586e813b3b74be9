# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
A client for version 4 of the SIMBAD astronomical database at CDS
(http://simbad.u-strasbg.fr/simbad/).

There are three ways to get data:

   *url_query()*:  the documented URL query interface, with HTML, text
                   or VOTable output.
   *script()*, *script_file()*:  submit a SIMBAD script, given as text
                   or as a file.
   *query()*:      the web services (SOAP) interface, with the
                   convenience methods query_object_by_id(),
                   query_object_by_bib() and query_object_by_coord().

A SimbadClient carries the server name along with the defaults for the
output type, the output format for each type and the parser to apply to
each type of output; see SimbadClient.attributes() for the full list.
Parsers for the two output types SIMBAD supports are provided:
parse_vo_table() for 'vo' and parse_txt_simple() for 'txt' output
written with FORMAT_TXT_SIMPLE_BASIC.

Requests to a server are spaced by at least ``delay`` seconds, whichever
client issues them, so as not to overload it.
"""

__all__ = ["SimbadClient", "servers", "default_server",
           "set_default_server"]

import copy
import importlib
import logging
import re
import sys

import requests
from astropy.coordinates import SkyCoord
from astropy.units import Quantity, Unit

from . import formats
from .exceptions import (SimbadAttributeError, SimbadFormatError,
                         SimbadQueryError, SimbadServiceError)
from .io import parse_txt_simple, parse_vo_table
from .utils import throttle
from .utils.entities import decode_double_encoded_entities
from .utils.http import DEFAULT_USER_AGENT, use_session
from .utils.logger_setup import LoggerSetup
from .wsquery import WSQueryInterface

log = logging.getLogger(__name__)

servers = {"cds": "simbad.u-strasbg.fr",
           "cfa": "simbad.cfa.harvard.edu"}
default_server = servers["cds"]


def set_default_server(name):
    """
    set the server that new clients will use by default given a short
    label representing its location.  Currently available labels can be
    listed via ``servers.keys()``; these include "cds" and "cfa".
    """
    global default_server
    try:
        default_server = servers[name]
    except KeyError:
        raise LookupError("unrecognized SIMBAD server label: " + name)
    SimbadClient.set_default(server=default_server)


# parsers that may be named without a module
builtin_parsers = {
    "parse_vo_table": parse_vo_table,
    "parse_txt_simple": parse_txt_simple,
}

# the web service methods, and where the type and format are in their
# argument lists
_query_args = {
    "id": {"method": "queryObjectById", "format": 1, "type": 2},
    "bib": {"method": "queryObjectByBib", "format": 1, "type": 2},
    "coo": {"method": "queryObjectByCoord", "format": 2, "type": 3},
}

# output type -> url_query output.format
_type_map = {"txt": "ASCII", "vo": "VOTable"}
_type_unmap = {value: key for key, value in _type_map.items()}

_data_marker = re.compile(r"^.*?::data:+\s*", re.S | re.M)
_release_pat = re.compile(r"Release:.*?</td>.*?<td.*?>(.*?)</td>",
                          re.S | re.I)


def _format_txt(fmt):
    return fmt.replace("\n", "")


def _format_vo(fmt):
    if not isinstance(fmt, str):
        fmt = ",".join(fmt)
    fmt = re.sub(r"\s+", ",", fmt)
    fmt = re.sub(r",+", ",", fmt)
    return fmt.strip(",")


_format_transform = {"txt": _format_txt, "vo": _format_vo}


class SimbadClient:
    """
    a client for the SIMBAD 4 services.

    The behavior of a client is controlled by its attributes, read with
    get() and changed with set() (or given to the constructor):

       ========  =======  ============================================
       autoload  bool     import the module of a parser named by a
                          dotted name
       debug     int      log requests at DEBUG level when non-zero
       delay     float    minimum seconds between requests to a server
       format    hash     default output format for each output type
       parser    hash     parser applied to each output type
       post      bool     url_query() uses POST rather than GET
       server    str      the SIMBAD server host name
       type      str      default output type ('txt' or 'vo')
       url_args  hash     default arguments of url_query()
       verbatim  bool     keep the front matter of script output
       ========  =======  ============================================

    Setting a hash attribute updates it rather than replacing it: the
    value is a dictionary or a string ``'key=value'``; a key given with
    None as value (or a string without ``=``) is deleted, and a true
    value for the key ``clear`` empties the hash first.
    """

    _static = {
        "autoload": True,
        "debug": 0,
        "delay": 3,
        "format": {
            "txt": formats.FORMAT_TXT_YAML_BASIC,
            "vo": formats.FORMAT_VO_BASIC,
            "script": "",
        },
        "parser": {
            "txt": "",
            "vo": "",
            "script": "",
        },
        "post": True,
        "server": default_server,
        "type": "txt",
        "url_args": {},
        "verbatim": False,
    }

    _hash_attributes = ("format", "parser", "url_args")

    def __init__(self, session=None, **attrs):
        """
        create a client starting from the class-wide defaults.

        Parameters
        ----------
        session : object
           optional session to use for network requests
        attrs
           attribute values, applied with set()
        """
        self._attrs = copy.deepcopy(self._static)
        self._session = use_session(session)
        self.set(**attrs)

    @classmethod
    def attributes(cls):
        """
        return the names of all attributes, in alphabetical order.
        """
        return sorted(cls._static)

    @staticmethod
    def agent():
        """
        return the user agent string identifying this package in requests.
        """
        return DEFAULT_USER_AGENT

    def get(self, name):
        """
        return the current value of the named attribute.
        """
        if name not in self._static:
            raise SimbadAttributeError(
                "Attribute '{}' is unknown".format(name))
        return self._attrs[name]

    @classmethod
    def get_default(cls, name):
        """
        return the class-wide default of the named attribute.
        """
        if name not in cls._static:
            raise SimbadAttributeError(
                "Attribute '{}' is unknown".format(name))
        return cls._static[name]

    def set(self, **attrs):
        """
        set the named attributes of this client.  Package logging is
        switched to DEBUG while the debug attribute is non-zero, and back
        to WARNING when it is set to zero.

        Returns
        -------
        SimbadClient
           this client
        """
        for name, value in attrs.items():
            self._store(self, self._attrs, name, value)
        if self._attrs["debug"]:
            LoggerSetup.set_debug_level()
            LoggerSetup.set_default_format()
        elif "debug" in attrs:
            LoggerSetup.set_warning_level()
        return self

    @classmethod
    def set_default(cls, **attrs):
        """
        set the class-wide defaults of the named attributes.  Clients
        created afterwards start from these values.
        """
        for name, value in attrs.items():
            cls._store(cls, cls._static, name, value)

    @classmethod
    def _store(cls, owner, store, name, value):
        if name not in cls._static:
            raise SimbadAttributeError(
                "Attribute '{}' is unknown".format(name))
        if name in cls._hash_attributes:
            cls._merge_hash(owner, store, name, value)
        else:
            store[name] = cls._transform(owner, name, value)

    @classmethod
    def _merge_hash(cls, owner, store, name, value):
        if not isinstance(value, dict):
            if "=" in value:
                key, val = value.split("=", 1)
                value = {key: val}
            else:
                value = {value: None}
        else:
            value = dict(value)

        hash_ = dict(store[name])
        if value.pop("clear", None):
            hash_ = {}
        for key, val in value.items():
            if val is None:
                hash_.pop(key, None)
            elif val:
                hash_[key] = cls._transform(owner, name, val)
            else:
                hash_[key] = ""
        store[name] = hash_

    @classmethod
    def _transform(cls, owner, name, value):
        if name == "delay":
            try:
                value = float(value)
            except (TypeError, ValueError):
                value = -1
            if value < 0:
                raise ValueError(
                    "Attribute 'delay' must be a non-negative number")
            return value
        elif name == "format":
            if callable(value):
                return value()
            if (isinstance(value, str) and re.match(r"^\w+$", value) and
                    value.startswith("FORMAT_") and
                    hasattr(formats, value)):
                return getattr(formats, value)
            return value
        elif name == "parser":
            if callable(value):
                return value
            if not isinstance(value, str):
                raise SimbadAttributeError(
                    "Attribute 'parser' value must be a string or callable")
            autoload = (owner._attrs if isinstance(owner, SimbadClient)
                        else cls._static)["autoload"]
            # only to see that it can be resolved
            _resolve_parser(value, autoload)
            return value
        return value

    def _get_parser(self, type_):
        """
        return the parser for the given output type, or None
        """
        parser = self.get("parser").get(type_)
        if not parser:
            return None
        if callable(parser):
            return parser
        return _resolve_parser(parser, self.get("autoload"))

    def _debug(self, msg, *args):
        if self.get("debug"):
            log.debug(msg, *args)

    def _delay(self):
        return throttle.delay(self.get("server"), self.get("delay"))

    def _retrieve(self, url, args=None, files=None, post=None):
        """
        issue a request after waiting for the server's delay to pass.
        Files are always posted; otherwise post (by default the post
        attribute) chooses between POST and GET.
        """
        args = args or {}
        if post is None:
            post = self.get("post")
        self._delay()
        try:
            if files is not None:
                self._debug("posting files %s to %s", list(files), url)
                response = self._session.post(url, data=args, files=files)
            elif post and args:
                self._debug("posting to %s: %s", url, sorted(args.items()))
                response = self._session.post(url, data=args)
            else:
                params = sorted(args.items())
                self._debug("getting from %s: %s", url, params)
                response = self._session.get(url, params=params)
            response.raise_for_status()
        except requests.RequestException as ex:
            raise SimbadServiceError.from_except(ex, url)
        return response

    def _apply_parser(self, type_, text):
        parser = self._get_parser(type_)
        if parser:
            return list(parser(text))
        return text

    def query(self, query, *args):
        """
        issue a web services (SOAP) query.

        Parameters
        ----------
        query : str
           the query type, which selects the SIMBAD method and its
           arguments:

              ===  ==================  =============================
              id   queryObjectById     (id, format, type)
              bib  queryObjectByBib    (bibcode, format, type)
              coo  queryObjectByCoord  (coord, radius, format, type)
              ===  ==================  =============================
        args
           the method arguments.  The type defaults to the ``type``
           attribute, the format to the ``format`` attribute for that
           type.  A coordinate may be given as a SkyCoord and a radius
           as a Quantity.

        Returns
        -------
        list or str or None
           None if the query found nothing; otherwise the output of the
           parser for the type, if one is set, or else the response text.

        Raises
        ------
        SimbadServiceError
           for errors connecting to or communicating with the service
        SimbadQueryError
           if the service reports an error
        """
        if query not in _query_args:
            raise ValueError("Illegal query type '{}'".format(query))
        qargs = _query_args[query]
        args = list(args)
        args += [None] * (qargs["type"] + 1 - len(args))

        if query == "coo":
            args[0], args[1] = _format_coord(args[0]), _format_radius(args[1])

        type_ = args[qargs["type"]] = args[qargs["type"]] or self.get("type")
        fmt = args[qargs["format"]] or self.get("format").get(type_)
        if fmt and type_ in _format_transform:
            fmt = _format_transform[type_](fmt)
        self._debug("%s format: %s", type_, fmt)
        args[qargs["format"]] = fmt or None
        parser = self._get_parser(type_)

        self._delay()
        resp = WSQueryInterface(
            self.get("server"), session=self._session).invoke(
                qargs["method"], *args)
        if resp is None:
            return None
        resp = decode_double_encoded_entities(resp)
        if parser:
            return list(parser(resp))
        return resp

    def query_object_by_bib(self, bibcode, format=None, type=None):
        """
        find the objects cited in a bibliographic reference; see query().
        """
        return self.query("bib", bibcode, format, type)

    def query_object_by_coord(self, coord, radius, format=None, type=None):
        """
        find the objects within radius of coord; see query().
        """
        return self.query("coo", coord, radius, format, type)

    def query_object_by_id(self, id, format=None, type=None):
        """
        find an object by one of its identifiers; see query().
        """
        return self.query("id", id, format, type)

    def url_query(self, query, params=None, **kwargs):
        """
        perform a query by URL.

        Parameters
        ----------
        query : str
           one of 'id' (by identifier), 'coo' (by coordinates), 'ref'
           (by references) or 'sam' (by criteria)
        params : dict
           the query arguments, as documented at
           http://simbad.u-strasbg.fr/simbad/sim-help?Page=sim-url;
           use this for names that are not Python identifiers, such as
           ``output.format``
        kwargs
           more query arguments, e.g. ``Ident='Arcturus'``

        If ``output.format`` is not given it is derived from the ``type``
        attribute ('txt' becomes 'ASCII', 'vo' becomes 'VOTable', other
        values are passed as they are).  The parser for the type matching
        the output format, if any, is applied to the result.

        Raises
        ------
        SimbadServiceError
           for errors connecting to or communicating with the service
        """
        args = dict(params or {})
        args.update(kwargs)
        for key, value in self.get("url_args").items():
            args.setdefault(key, value)
        if not args.get("output.format"):
            type_ = self.get("type")
            args["output.format"] = _type_map.get(type_, type_)

        url = "http://{}/simbad/sim-{}".format(self.get("server"), query)
        resp = self._retrieve(url, args)
        text = decode_double_encoded_entities(resp.text)

        type_ = _type_unmap.get(args["output.format"])
        if type_:
            return self._apply_parser(type_, text)
        return text

    def script(self, script):
        """
        submit a SIMBAD script, given as text.

        Unless the ``verbatim`` attribute is true, the front matter of the
        output, up to and including the '::data::::' line, is removed.
        The 'script' parser, if any, is applied to the result.

        Returns
        -------
        list or str or None
           None if the output is empty

        Raises
        ------
        SimbadServiceError
           for errors connecting to or communicating with the service
        SimbadQueryError
           if the output has no data section (it usually holds the
           error messages of the script)
        """
        url = "http://{}/simbad/sim-script".format(self.get("server"))
        resp = self._retrieve(
            url, {"submit": "submit script", "script": script}, post=False)
        return self._script_output(resp, url)

    def script_file(self, filename):
        """
        submit a SIMBAD script file, given by name; see script().
        """
        url = "http://{}/simbad/sim-script".format(self.get("server"))
        with open(filename, "rb") as fd:
            resp = self._retrieve(
                url, {"submit": "submit file"},
                files={"CriteriaFile": (filename, fd)})
        return self._script_output(resp, url)

    def _script_output(self, resp, url):
        text = resp.text
        if not text:
            return None
        if not self.get("verbatim"):
            text, found = _data_marker.subn("", text, count=1)
            if not found:
                raise SimbadQueryError(text, url=url)
        text = decode_double_encoded_entities(text)
        return self._apply_parser("script", text)

    def release(self, as_tuple=False):
        """
        return the release of the SIMBAD server, as scraped from its
        home page, e.g. 'SIMBAD4 1.045 - 27-Jul-2007'.

        This is not based on a published interface; it returns the
        contents of the table cell following 'Release:'.

        Parameters
        ----------
        as_tuple : bool
           if True, return (major, minor, point, patch, date) instead,
           e.g. (4, 1, 45, '', '27-Jul-2007').  The patch is usually
           empty, but release '1.019a' has patch 'a'.

        Raises
        ------
        SimbadServiceError
           for errors connecting to or communicating with the service
        SimbadFormatError
           if no release information is found or it is ill-formed
        """
        url = "http://{}/simbad/".format(self.get("server"))
        resp = self._retrieve(url)
        m = _release_pat.search(resp.text)
        if not m:
            raise SimbadFormatError(
                reason="Release information not found", url=url)
        rls = re.sub(r"<.*?>", "", m.group(1)).strip()
        if not as_tuple:
            return rls

        parts = re.sub(r"\s+-\s+", " ", rls).split()
        if len(parts) < 3:
            raise SimbadFormatError(
                reason="Release '{}' is ill-formed".format(rls), url=url)
        major, minor, date = parts[:3]
        major = re.sub(r"^\D+", "", major)
        mm = re.match(r"^(\d+)\.(\d+)(.*)$", minor)
        if not major.isdigit() or not mm:
            raise SimbadFormatError(
                reason="Release '{}' is ill-formed".format(rls), url=url)
        return (int(major), int(mm.group(1)), int(mm.group(2)),
                mm.group(3), date)


def _format_coord(coord):
    """
    return a coordinate argument as SIMBAD expects it: a SkyCoord
    becomes ICRS decimal degrees.
    """
    if isinstance(coord, SkyCoord):
        return "{} {}".format(coord.icrs.ra.deg, coord.icrs.dec.deg)
    return coord


def _format_radius(radius):
    """
    return a radius argument as SIMBAD expects it: a Quantity becomes
    arcminutes with the 'm' suffix.
    """
    if isinstance(radius, Quantity):
        return "{}m".format(radius.to(Unit("arcmin")).value)
    return radius


def _resolve_parser(name, autoload=True):
    """
    return the callable named by name: a built-in parser name, or a
    dotted name (``pkg.module.func`` or ``pkg.module:func``).

    Raises
    ------
    SimbadAttributeError
       if the name cannot be resolved
    """
    if name in builtin_parsers:
        return builtin_parsers[name]

    if ":" in name:
        modname, _, funcname = name.partition(":")
    else:
        modname, _, funcname = name.rpartition(".")
    if not modname:
        raise SimbadAttributeError(
            "Parser '{}' is not a known parser".format(name))

    module = sys.modules.get(modname)
    if module is None:
        if not autoload:
            raise SimbadAttributeError(
                "Parser module '{}' is not loaded".format(modname))
        try:
            module = importlib.import_module(modname)
        except ImportError as ex:
            raise SimbadAttributeError(
                "Parser module '{}' cannot be loaded: {}".format(modname, ex)) from ex

    parser = getattr(module, funcname, None)
    if not callable(parser):
        raise SimbadAttributeError("Parser '{}' is undefined".format(name))
    return parser
