# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
The SIMBAD web service (SOAP) query interface.

The service exposes one operation per query type; each takes positional
string arguments (named ``in0``, ``in1``, ... on the wire) and returns a
single string, or nil when nothing was found.
"""

__all__ = ["WSQueryInterface", "methods"]

import logging
import xml.etree.ElementTree as ET

import requests
from defusedxml import ElementTree as etree
from defusedxml import DefusedXmlException

from .exceptions import SimbadFormatError, SimbadQueryError, SimbadServiceError
from .utils.http import use_session

log = logging.getLogger(__name__)

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"
XSI = "http://www.w3.org/2001/XMLSchema-instance"
XSD = "http://www.w3.org/2001/XMLSchema"
SERVICE_NS = "http://uif.simbad.cds"

ET.register_namespace("soapenv", SOAP_ENV)
ET.register_namespace("xsi", XSI)
ET.register_namespace("xsd", XSD)

# method name -> names of its arguments, in order
methods = {
    "queryObjectById": ("id", "format", "type"),
    "queryObjectByBib": ("bibcode", "format", "type"),
    "queryObjectByCoord": ("coord", "radius", "format", "type"),
}


class WSQueryInterface:
    """
    a proxy for the web service of a SIMBAD server.
    """
    path = "/axis/services/WSQueryInterface"

    def __init__(self, server, session=None):
        """
        Parameters
        ----------
        server : str
           the host name of the SIMBAD server
        session : object
           optional session to use for network requests
        """
        self._server = server
        self._session = use_session(session)

    @property
    def endpoint(self):
        """
        the URL the SOAP requests are posted to
        """
        return "http://" + self._server + self.path

    def envelope(self, method, args):
        """
        return the SOAP request for calling method with args, as bytes.
        """
        envelope = ET.Element("{%s}Envelope" % SOAP_ENV)
        body = ET.SubElement(envelope, "{%s}Body" % SOAP_ENV)
        call = ET.SubElement(body, "{%s}%s" % (SERVICE_NS, method))
        for index, arg in enumerate(args):
            param = ET.SubElement(call, "in%d" % index)
            if arg is None:
                param.set("{%s}nil" % XSI, "true")
            else:
                param.set("{%s}type" % XSI, "xsd:string")
                param.text = str(arg)
        return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)

    def invoke(self, method, *args):
        """
        call a service operation and return its result.

        Parameters
        ----------
        method : str
           the operation name, one of the keys of ``methods``
        args
           the operation's arguments; None is sent as nil

        Returns
        -------
        str
           the result text, or None if the service returned nil

        Raises
        ------
        SimbadServiceError
           for errors connecting to or communicating with the service
        SimbadQueryError
           if the service answers with a SOAP fault
        SimbadFormatError
           if the response is not a readable SOAP message
        """
        if method not in methods:
            raise ValueError("unknown web service method: " + method)
        args = list(args) + [None] * (len(methods[method]) - len(args))

        url = self.endpoint
        log.debug("invoking %s%r at %s", method, tuple(args), url)
        try:
            response = self._session.post(
                url, data=self.envelope(method, args),
                headers={"Content-Type": "text/xml; charset=utf-8",
                         "SOAPAction": '""'})
        except requests.RequestException as ex:
            raise SimbadServiceError.from_except(ex, url)

        try:
            root = etree.fromstring(response.content)
        except (etree.ParseError, DefusedXmlException) as ex:
            if not response.ok:
                raise SimbadServiceError.from_response(response, url)
            raise SimbadFormatError(cause=ex, url=url)

        body = root.find("{%s}Body" % SOAP_ENV)
        fault = body.find("{%s}Fault" % SOAP_ENV) if body is not None else None
        if fault is not None:
            raise SimbadQueryError(
                fault.findtext("faultstring"),
                label=fault.findtext("faultcode"), url=url)
        if not response.ok:
            raise SimbadServiceError.from_response(response, url)
        if body is None or len(body) == 0:
            raise SimbadFormatError(
                reason="No SOAP body in response to " + method, url=url)

        result = body[0]
        if len(result) == 0:
            return None
        ret = result[0]
        if ret.get("{%s}nil" % XSI) in ("true", "1"):
            return None
        return ret.text or ""
