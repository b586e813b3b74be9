# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Pacing of requests to a server.

The time of the last request is kept per server name for the whole
process, so clients sharing a server also share its pacing.
"""
import logging
import time

__all__ = ["delay", "reset"]

log = logging.getLogger(__name__)

_last = {}


def delay(server, seconds):
    """
    wait until at least ``seconds`` have passed since the last request to
    server, then record the current time as the time of the next one.

    Returns
    -------
    float
       the recorded time
    """
    last = _last.get(server, 0)
    wait = last + seconds - time.time()
    if wait > 0:
        log.debug("waiting %.2f s before the next request to %s",
                  wait, server)
        time.sleep(wait)
    _last[server] = time.time()
    return _last[server]


def reset(server=None):
    """
    forget the last request time of server, or of all servers
    """
    if server is None:
        _last.clear()
    else:
        _last.pop(server, None)
