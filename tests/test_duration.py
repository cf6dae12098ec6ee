"""Tests for the Go-style duration parser used by `timeout`."""

from __future__ import annotations

import pytest

from core.duration import parse_duration
from core.errors import ConfigurationError


@pytest.mark.parametrize(
    ("text", "seconds"),
    [
        ("5m", 300.0),
        ("30s", 30.0),
        ("1h30m", 5400.0),
        ("1.5s", 1.5),
        ("250ms", 0.25),
        ("2m3s", 123.0),
        ("0", 0.0),
        ("+10s", 10.0),
        ("-1s", -1.0),
    ],
)
def test_parse_duration_accepts_go_syntax(text: str, seconds: float) -> None:
    assert parse_duration(text) == pytest.approx(seconds)


def test_parse_duration_handles_sub_second_units() -> None:
    assert parse_duration("1500us") == pytest.approx(0.0015)
    assert parse_duration("1µs") == pytest.approx(1e-6)
    assert parse_duration("100ns") == pytest.approx(1e-7)


@pytest.mark.parametrize("text", ["", "5", "five minutes", "5 m", "1d", "m", "-"])
def test_parse_duration_rejects_malformed_values(text: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        parse_duration(text)

    assert excinfo.value.code == "E_CONFIGURATION"
