"""Tests for configuration loading and client creation."""

import json
import logging
from unittest.mock import patch

import httpx
import pydantic
import pytest
import structlog

from kubelet_summary import config, summaryapi


def _write_config(tmp_path, data: dict) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    return str(path)


# ---------------------------------------------------------------------------
# ClientConfig / load_config
# ---------------------------------------------------------------------------


def test_config_defaults():
    """Defaults target the kubelet's secure port over https."""
    cfg = config.ClientConfig()
    assert cfg.port == 10250
    assert cfg.use_insecure_scheme is False
    assert cfg.timeout == summaryapi.DEFAULT_TIMEOUT
    assert cfg.log_level == "INFO"


def test_config_is_frozen():
    """Configuration cannot change after construction."""
    cfg = config.ClientConfig()
    with pytest.raises(pydantic.ValidationError):
        cfg.port = 10255


@pytest.mark.parametrize("port", [0, 65536])
def test_config_rejects_invalid_port(port: int):
    with pytest.raises(pydantic.ValidationError):
        config.ClientConfig(port=port)


def test_config_rejects_non_positive_timeout():
    with pytest.raises(pydantic.ValidationError):
        config.ClientConfig(timeout=0)


def test_load_config_reads_json(tmp_path):
    """Values from the JSON file override defaults."""
    path = _write_config(tmp_path, {"port": 10255, "use_insecure_scheme": True})

    cfg = config.load_config(path)

    assert cfg.port == 10255
    assert cfg.use_insecure_scheme is True


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="not found"):
        config.load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json(tmp_path):
    """A file that is not JSON fails validation."""
    path = tmp_path / "config.json"
    path.write_text("port: 10255")

    with pytest.raises(pydantic.ValidationError):
        config.load_config(str(path))


def test_load_config_invalid_value(tmp_path):
    path = _write_config(tmp_path, {"port": "kubelet"})

    with pytest.raises(pydantic.ValidationError):
        config.load_config(path)


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


@patch("kubelet_summary.config.structlog.configure")
def test_configure_logging_sets_filtering_level(mock_configure):
    """The requested level becomes the filtering level."""
    config.configure_logging("debug")

    mock_configure.assert_called_once()
    wrapper = mock_configure.call_args.kwargs["wrapper_class"]
    assert wrapper is structlog.make_filtering_bound_logger(logging.DEBUG)


@patch("kubelet_summary.config.structlog.configure")
def test_configure_logging_unknown_level_falls_back_to_info(mock_configure):
    config.configure_logging("chatty")

    wrapper = mock_configure.call_args.kwargs["wrapper_class"]
    assert wrapper is structlog.make_filtering_bound_logger(logging.INFO)


@patch("kubelet_summary.config.structlog.configure")
def test_configure_logging_renders_url_after_msg(mock_configure):
    """The kubelet url follows the message; absent keys are not rendered."""
    config.configure_logging("info")

    renderer = mock_configure.call_args.kwargs["processors"][-1]
    line = renderer(
        None,
        "info",
        {
            "status_code": 200,
            "url": "https://n1:10250/stats/summary/",
            "msg": "Kubelet request completed",
            "level": "info",
        },
    )

    assert line == (
        'level=info msg="Kubelet request completed" '
        "url=https://n1:10250/stats/summary/ status_code=200"
    )


# ---------------------------------------------------------------------------
# create_client
# ---------------------------------------------------------------------------


@patch("kubelet_summary.config.configure_logging")
def test_create_client_from_path(mock_logging, tmp_path):
    """The client is built from the file and logging is configured."""
    path = _write_config(
        tmp_path,
        {"port": 10255, "use_insecure_scheme": True, "log_level": "DEBUG"},
    )
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"node": {"nodeName": "n1"}})

    client = config.create_client(path, transport=httpx.MockTransport(handler))
    summary = client.get_summary("n1")

    mock_logging.assert_called_once_with("DEBUG")
    assert summary.node.node_name == "n1"
    assert str(requests[0].url) == "http://n1:10255/stats/summary/"


@patch("kubelet_summary.config.configure_logging")
def test_create_client_uses_env_var(mock_logging, tmp_path, monkeypatch):
    """Without an explicit path, the environment variable is used."""
    path = _write_config(tmp_path, {"port": 4194})
    monkeypatch.setenv(config.CONFIG_ENV_VAR, path)

    client = config.create_client()

    assert isinstance(client, summaryapi.SummaryClient)
    assert client.port == 4194
    client.close()
