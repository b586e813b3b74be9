# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Logger setup for the simbadclient package.

All modules log to children of the ``simbadclient`` logger, which stays
at WARNING until a client is given a non-zero ``debug`` attribute.  The
debug output goes to stdout through a handler of the package logger;
the root logger is left alone.
"""
import sys
import logging

ROOT_LOGGER = "simbadclient"

DEFAULT_FORMAT = ('%(levelname)7s - [%(filename)s:%(lineno)3s'
                  ' - %(funcName)10s()] - %(message)s')


class LoggerSetup:
    """
    Manage the logger setup.
    """
    __handler = None

    @staticmethod
    def set_default_format():
        """
        Send the package messages to stdout with the default format.
        Calling this again does not add another handler.
        """
        if LoggerSetup.__handler is None:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            LoggerSetup.__handler = handler
        logger = logging.getLogger(ROOT_LOGGER)
        if LoggerSetup.__handler not in logger.handlers:
            logger.addHandler(LoggerSetup.__handler)

    @staticmethod
    def set_debug_level():
        """
        Switch to debug level.
        """
        logging.getLogger(ROOT_LOGGER).setLevel(logging.DEBUG)

    @staticmethod
    def set_warning_level():
        """
        Switch back to warning level and drop the stdout handler.
        """
        logger = logging.getLogger(ROOT_LOGGER)
        logger.setLevel(logging.WARNING)
        if LoggerSetup.__handler is not None:
            logger.removeHandler(LoggerSetup.__handler)
