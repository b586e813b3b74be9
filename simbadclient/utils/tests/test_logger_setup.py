#!/usr/bin/env python
# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Tests for simbadclient.utils.logger_setup
"""
import logging

import pytest

from simbadclient.utils.logger_setup import ROOT_LOGGER, LoggerSetup


@pytest.fixture(autouse=True)
def restore_level():
    yield
    LoggerSetup.set_warning_level()


def package_handlers():
    return [handler for handler in logging.getLogger(ROOT_LOGGER).handlers
            if isinstance(handler, logging.StreamHandler)]


def test_debug_then_warning():
    LoggerSetup.set_debug_level()
    LoggerSetup.set_default_format()
    assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG
    assert len(package_handlers()) == 1

    LoggerSetup.set_warning_level()
    assert logging.getLogger(ROOT_LOGGER).level == logging.WARNING
    assert package_handlers() == []


def test_one_handler():
    LoggerSetup.set_default_format()
    LoggerSetup.set_default_format()
    assert len(package_handlers()) == 1


def test_root_logger_untouched():
    before = list(logging.getLogger().handlers)
    LoggerSetup.set_default_format()
    assert logging.getLogger().handlers == before


def test_module_loggers_are_children():
    from simbadclient import client
    assert client.log.name.startswith(ROOT_LOGGER + ".")
