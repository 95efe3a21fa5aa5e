"""Tests for the logging dictConfig and health check suppression."""

import logging
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irconsole.logging_config import HealthCheckFilter, get_logging_config


def make_record(name, message):
    return logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)


def test_health_check_is_dropped():
    record = make_record("uvicorn.access", '127.0.0.1:5000 - "GET /health HTTP/1.1" 200')

    assert HealthCheckFilter().filter(record) is False


def test_other_access_lines_pass():
    record = make_record("uvicorn.access", '127.0.0.1:5000 - "GET /catalog/process HTTP/1.1" 200')

    assert HealthCheckFilter().filter(record) is True


def test_app_loggers_are_not_filtered():
    assert HealthCheckFilter().filter(make_record("irconsole.main", "GET /health")) is True


def test_level_applies_to_irconsole_tree():
    config = get_logging_config("debug")

    assert config["loggers"]["irconsole"]["level"] == "DEBUG"
    assert config["loggers"]["uvicorn.access"]["handlers"] == ["access"]
    assert config["loggers"]["httpx"]["level"] == "WARNING"
