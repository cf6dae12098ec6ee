"""End-to-end tests for the `check` / `in` / `out` commands."""

from __future__ import annotations

import functools
import hashlib
import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from adapters.http_client import HTTPFetcher

URL = "https://example.com/artifact.bin"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_RESOURCE_LOG_LEVEL", "ERROR")


def _use_transport(monkeypatch: pytest.MonkeyPatch, handler) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    monkeypatch.setattr(
        cli_main,
        "HTTPFetcher",
        functools.partial(HTTPFetcher, transport=httpx.MockTransport(recording)),
    )
    return seen


def test_check_prints_versions_as_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_transport(monkeypatch, lambda request: httpx.Response(200, content=b"hello"))

    result = runner.invoke(cli_main.app, ["check"], input=json.dumps({"source": {"url": URL}}))

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"sha1": "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"}]


def test_check_with_previous_etag_sends_conditional_request(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _use_transport(monkeypatch, lambda request: httpx.Response(304))
    payload = {"source": {"url": URL, "headers": {"X-Env": ["ci"]}}, "version": {"etag": '"v1"'}}

    result = runner.invoke(cli_main.app, ["check"], input=json.dumps(payload))

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"etag": '"v1"'}]
    assert seen[0].headers["if-none-match"] == '"v1"'
    assert seen[0].headers["x-env"] == "ci"


def test_check_with_null_version_is_first_check(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_transport(monkeypatch, lambda request: httpx.Response(200, headers={"ETag": "t"}))

    result = runner.invoke(
        cli_main.app, ["check"], input=json.dumps({"source": {"url": URL}, "version": None})
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"etag": "t"}]


def test_in_downloads_and_prints_version_and_metadata(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _use_transport(
        monkeypatch,
        lambda request: httpx.Response(
            200, headers={"ETag": '"v1"', "Content-Type": "text/plain"}, content=b"hello"
        ),
    )
    payload = {"source": {"url": URL}, "version": {"etag": '"v1"'}, "params": {}}

    result = runner.invoke(cli_main.app, ["in", str(tmp_path)], input=json.dumps(payload))

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "version": {"etag": '"v1"', "sha1": hashlib.sha1(b"hello").hexdigest()},
        "metadata": [{"name": "content-type", "value": "text/plain"}],
    }
    assert (tmp_path / "downloaded").read_bytes() == b"hello"


def test_in_integrity_mismatch_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _use_transport(
        monkeypatch, lambda request: httpx.Response(200, headers={"ETag": '"v2"'}, content=b"x")
    )
    payload = {"source": {"url": URL}, "version": {"etag": '"v1"'}}

    result = runner.invoke(cli_main.app, ["in", str(tmp_path)], input=json.dumps(payload))

    assert result.exit_code == 1
    assert "E_INTEGRITY" in result.output
    assert not (tmp_path / "downloaded").exists()


def test_in_checks_sha1_of_a_full_version_payload(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _use_transport(
        monkeypatch, lambda request: httpx.Response(200, headers={"ETag": '"v1"'}, content=b"hello")
    )
    payload = {"source": {"url": URL}, "version": {"etag": '"v1"', "sha1": "0" * 40}}

    result = runner.invoke(cli_main.app, ["in", str(tmp_path)], input=json.dumps(payload))

    assert result.exit_code == 1
    assert "E_INTEGRITY" in result.output
    assert list(tmp_path.iterdir()) == []


def test_check_echoes_full_previous_version_when_content_is_unchanged(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _use_transport(monkeypatch, lambda request: httpx.Response(200, content=b"hello"))
    previous = {"etag": '"v1"', "sha1": hashlib.sha1(b"hello").hexdigest()}

    result = runner.invoke(
        cli_main.app, ["check"], input=json.dumps({"source": {"url": URL}, "version": previous})
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [previous]


def test_invalid_payload_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _use_transport(monkeypatch, lambda request: httpx.Response(200))

    result = runner.invoke(cli_main.app, ["check"], input="{not json")

    assert result.exit_code == 1
    assert "E_CONFIGURATION" in result.output
    assert seen == []


def test_missing_url_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_transport(monkeypatch, lambda request: httpx.Response(200))

    result = runner.invoke(cli_main.app, ["check"], input=json.dumps({"source": {}}))

    assert result.exit_code == 1
    assert "E_CONFIGURATION" in result.output


def test_bad_timeout_is_reported_before_network(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _use_transport(monkeypatch, lambda request: httpx.Response(200))
    payload = {"source": {"url": URL, "timeout": "a while"}}

    result = runner.invoke(cli_main.app, ["check"], input=json.dumps(payload))

    assert result.exit_code == 1
    assert "failed to parse timeout" in result.output
    assert seen == []


def test_out_always_fails(tmp_path: Path) -> None:
    result = runner.invoke(cli_main.app, ["out", str(tmp_path)], input="{}")

    assert result.exit_code == 1
    assert "not implemented" in result.output
