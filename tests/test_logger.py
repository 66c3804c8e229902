import logging
import os
from unittest import mock

from dashboard_client.logger import setup_logging


def test_level_from_environment():
    root = logging.getLogger()
    previous = root.level
    try:
        with mock.patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            assert setup_logging() == logging.DEBUG
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_explicit_level_and_unknown_names():
    root = logging.getLogger()
    previous = root.level
    try:
        assert setup_logging("error") == logging.ERROR
        assert logging.getLogger("httpcore").level == logging.ERROR
        assert setup_logging("chatty") == logging.INFO
    finally:
        root.setLevel(previous)
