"""Tests for logging configuration."""

import io
import json

import httpx
import pytest
import structlog

from conftest import RecordingHandler
from easyhttp import EasyHttpRequest, HttpCallError
from easyhttp.utils.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_json_output(capsys):
    configure_logging("DEBUG", json_format=True)

    get_logger("easyhttp.test").info("Request sent", status_code=200)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "Request sent"
    assert event["logger"] == "easyhttp.test"
    assert event["status_code"] == 200
    assert event["level"] == "info"
    assert "timestamp" in event


def test_level_filtering(capsys):
    configure_logging("WARNING", json_format=True)

    logger = get_logger()
    logger.debug("hidden")
    logger.warning("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "shown" in out


def test_unknown_level_defaults_to_info(capsys):
    configure_logging("not-a-level", json_format=True)

    logger = get_logger()
    logger.debug("hidden")
    logger.info("visible")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "visible" in out


def test_custom_stream():
    stream = io.StringIO()
    configure_logging("INFO", json_format=True, stream=stream)

    get_logger("easyhttp.test").info("to stream")

    assert json.loads(stream.getvalue())["event"] == "to stream"


def test_logger_created_before_configuration_follows_it():
    logger = get_logger("easyhttp.early")
    stream = io.StringIO()

    configure_logging("WARNING", json_format=True, stream=stream)
    logger.info("hidden")
    logger.warning("shown")

    lines = stream.getvalue().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["shown"]
    assert json.loads(lines[0])["logger"] == "easyhttp.early"


def test_reconfiguration_takes_effect():
    first, second = io.StringIO(), io.StringIO()
    logger = get_logger("easyhttp.test")

    configure_logging("INFO", json_format=True, stream=first)
    logger.info("one")
    configure_logging("INFO", json_format=True, stream=second)
    logger.info("two")

    assert json.loads(first.getvalue())["event"] == "one"
    assert json.loads(second.getvalue())["event"] == "two"


def test_client_events_follow_configuration(make_client, base_url):
    stream = io.StringIO()
    configure_logging("WARNING", json_format=True, stream=stream)

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_client(RecordingHandler(content="ok"))
    client.send(EasyHttpRequest.builder(base_url).GET().build())
    failing = make_client(refuse)
    with pytest.raises(HttpCallError):
        failing.send(EasyHttpRequest.builder(base_url).GET().build())

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "HTTP call failed"
    assert event["level"] == "warning"
    assert event["logger"] == "easyhttp.client"
    assert event["method"] == "GET"
    assert event["url"] == "http://testserver/test"
