# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
SIMBAD client exceptions.

Everything raised for a failed exchange with SIMBAD derives from
SimbadAccessError:

   SimbadServiceError    the request did not get a usable HTTP answer
   SimbadQueryError      SIMBAD answered, but with an error of its own
   SimbadFormatError     the answer could not be read
     StructuralError     ... because its XML tags are not properly nested
   BackendUnavailableError   no XML parser could be set up

Bad client attributes raise SimbadAttributeError, a KeyError.
"""

__all__ = [
    "SimbadAccessError", "SimbadFormatError", "SimbadServiceError",
    "SimbadQueryError", "StructuralError", "BackendUnavailableError",
    "SimbadAttributeError"]


class SimbadAccessError(Exception):
    """
    the base of the errors met while querying SIMBAD or reading its output.

    Attributes
    ----------
    reason : str
       what went wrong; also the message of the exception
    url : str
       the URL queried, or None if not known
    cause : Exception
       the lower-level exception this one stands for, if any
    """
    default_reason = "SIMBAD access failed"

    def __init__(self, reason=None, url=None, cause=None):
        self.reason = reason or self.default_reason
        self.url = url
        self.cause = cause
        super().__init__(self.reason)


class SimbadServiceError(SimbadAccessError):
    """
    the server could not be reached or answered with an HTTP error.
    ``code`` is the HTTP status, or None when no response came back.
    """
    default_reason = "SIMBAD service unavailable"

    def __init__(self, reason=None, code=None, url=None, cause=None):
        super().__init__(reason, url, cause)
        self.code = code

    @classmethod
    def from_response(cls, response, url=None):
        """
        the error for an HTTP response with a failure status
        """
        return cls("HTTP {} {}".format(response.status_code, response.reason),
                   response.status_code, url or response.url)

    @classmethod
    def from_except(cls, exc, url=None):
        """
        the error for an exception raised by requests
        """
        response = getattr(exc, "response", None)
        code = response.status_code if response is not None else None
        return cls(str(exc), code, url, cause=exc)


class SimbadQueryError(SimbadAccessError):
    """
    SIMBAD processed the request and reported an error: a SOAP fault from
    the web service (``label`` holds the fault code), or script output
    without a data section (the reason holds the whole output, which
    carries SIMBAD's error messages).
    """
    default_reason = "SIMBAD reported an error"

    def __init__(self, reason=None, label=None, url=None):
        super().__init__(reason, url)
        self.label = label


class SimbadFormatError(SimbadAccessError):
    """
    the response is not what SIMBAD is expected to send: not XML, no SOAP
    body, no release information on the home page.
    """
    default_reason = "Unreadable SIMBAD response"

    def __init__(self, reason=None, url=None, cause=None):
        if cause is not None and not reason:
            reason = "{}: {}".format(type(cause).__name__, cause)
        super().__init__(reason, url, cause)


class StructuralError(SimbadFormatError):
    """
    the tag nesting of an XML document is broken: an end tag without an
    open element, an end tag that does not match the open element, or
    elements left open at the end of input.
    """
    default_reason = "Malformed XML"

    def __init__(self, reason=None, cause=None, url=None):
        super().__init__(reason, url, cause)


class BackendUnavailableError(SimbadAccessError):
    """
    no usable XML parsing backend could be set up
    """
    default_reason = "No XML parsing backend available"


class SimbadAttributeError(KeyError):
    """
    an unknown client attribute, or an attribute value that cannot be used
    """

    def __str__(self):
        return str(self.args[0]) if self.args else ''
