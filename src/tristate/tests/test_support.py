"""Tests for settings, logging, defaults and violation records."""

from __future__ import annotations

import io

import orjson
import pytest
from pydantic import ValidationError

from tristate import Absent, Failure, State, Success, UnwrapError, Violation, default_of
from tristate.config import clear_settings_cache, get_settings
from tristate.observability import BoundLogger, ConsoleRenderer, configure_logging, get_logger


# ═════════════════════════════════════════════════════════════════════════════
# Settings
# ═════════════════════════════════════════════════════════════════════════════


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("TRISTATE_BORROW_CHECKS", "TRISTATE_CHECK_UNCHECKED", "TRISTATE_LOG_LEVEL", "TRISTATE_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()

    settings = get_settings()
    assert settings.check_unchecked is True
    assert settings.borrow_checks is __debug__
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "console"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRISTATE_CHECK_UNCHECKED", "0")
    monkeypatch.setenv("TRISTATE_LOG_LEVEL", "debug")
    monkeypatch.setenv("TRISTATE_LOG_FORMAT", "json")
    clear_settings_cache()

    settings = get_settings()
    assert settings.check_unchecked is False
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_settings_cached() -> None:
    assert get_settings() is get_settings()


# ═════════════════════════════════════════════════════════════════════════════
# Logging
# ═════════════════════════════════════════════════════════════════════════════


def test_violation_logged_as_json() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=buf)

    with pytest.raises(UnwrapError):
        Absent().unwrap()

    entry = orjson.loads(buf.getvalue().splitlines()[-1])
    assert entry["event"] == "unwrap violated"
    assert entry["level"] == "debug"
    assert entry["logger"] == "tristate"
    assert entry["operation"] == "unwrap"
    assert entry["actual"] == "absent"
    assert entry["expected"] == ["success"]


def test_violation_silent_at_info() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="INFO", output=buf)

    with pytest.raises(UnwrapError):
        Failure("e").unwrap()
    assert buf.getvalue() == ""


def test_unreachable_failure_logged_as_error() -> None:
    buf = io.StringIO()
    configure_logging(format="json", level="ERROR", output=buf)

    with pytest.raises(UnwrapError):
        Failure("e").unwrap_infallible()
    entry = orjson.loads(buf.getvalue())
    assert entry["level"] == "error"
    assert entry["unreachable"] is True


def test_level_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRISTATE_LOG_LEVEL", "DEBUG")
    clear_settings_cache()
    assert get_logger("x").is_enabled_for(10)


def test_implicit_renderer_does_not_pin_level(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    get_logger("x").error("first event")
    assert "first event" in capsys.readouterr().err
    assert not get_logger("x").is_enabled_for(10)

    monkeypatch.setenv("TRISTATE_LOG_LEVEL", "DEBUG")
    clear_settings_cache()
    assert get_logger("x").is_enabled_for(10)


def test_console_renderer() -> None:
    buf = io.StringIO()
    log = BoundLogger(context={"logger": "lookup"},
                      _renderer=ConsoleRenderer(output=buf, colors=False, show_timestamp=False))
    log.bind(key="user:1").info("cache miss", attempt=2, hit=False)

    assert buf.getvalue() == '[info] cache miss attempt=2 hit=false key="user:1" logger="lookup"\n'


def test_unknown_format_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


# ═════════════════════════════════════════════════════════════════════════════
# Defaults
# ═════════════════════════════════════════════════════════════════════════════


class Port:
    def __init__(self, number: int) -> None:
        self.number = number

    @classmethod
    def default(cls) -> Port:
        return cls(8080)


def test_default_of_builtins() -> None:
    assert default_of(int) == 0
    assert default_of(str) == ""
    assert default_of(list) == []
    assert default_of(dict) == {}


def test_default_of_classmethod() -> None:
    assert default_of(Port).number == 8080
    assert Absent().unwrap_or_default(Port).number == 8080


def test_default_of_factory() -> None:
    assert default_of(lambda: 42) == 42


class Timeout:
    def __init__(self, seconds: float = 30.0) -> None:
        self.seconds = seconds

    def default(self) -> float:
        return self.seconds


def test_default_of_ignores_instance_method() -> None:
    """An instance-level `default` is not a type default; the class is called bare."""
    assert isinstance(default_of(Timeout), Timeout)
    assert default_of(Timeout).seconds == 30.0
    assert Absent().unwrap_or_default(Timeout).seconds == 30.0


# ═════════════════════════════════════════════════════════════════════════════
# Violation Records
# ═════════════════════════════════════════════════════════════════════════════


def test_violation_render() -> None:
    v = Violation.create("unwrap_option", State.FAILURE, State.SUCCESS, State.ABSENT, detail="'e'")
    assert v.render() == "unwrap_option() on Failure('e'): expected Success or Absent"
    assert v.actual_label == "Failure('e')"


def test_violation_is_frozen() -> None:
    v = Violation.create("unwrap", State.ABSENT, State.SUCCESS)
    with pytest.raises(ValidationError):
        v.operation = "other"  # type: ignore[misc]


def test_violation_dump() -> None:
    with pytest.raises(UnwrapError) as exc_info:
        Success(1).unwrap_failure()
    dumped = exc_info.value.violation.model_dump(mode="json")
    assert dumped["operation"] == "unwrap_failure"
    assert dumped["expected"] == ["failure"]
    assert dumped["actual"] == "success"
    assert dumped["detail"] == "1"
