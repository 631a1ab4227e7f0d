"""Test logging setup and the performance monitor decorator."""

import logging

import pytest

from quote_engine.core import logging_utils
from quote_engine.core.logging_utils import configure_logging
from quote_engine.services.performance_monitor import performance_monitor


class TestLogging:
    """Test logging helpers."""

    def test_configure_logging_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only the first call reaches basicConfig."""
        calls: list[dict[str, object]] = []
        monkeypatch.setattr(logging_utils, "_is_configured", False)
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        configure_logging(level="DEBUG")
        configure_logging(level="ERROR")

        assert len(calls) == 1
        assert calls[0]["level"] == "DEBUG"


class TestPerformanceMonitor:
    """Test the timing decorator."""

    def test_returns_result(self) -> None:
        """Wrapped function result passes through."""

        @performance_monitor("add")
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_slow_call_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Calls over the threshold log a warning."""

        @performance_monitor("always_slow", max_duration_ms=-1)
        def work() -> None:
            return None

        with caplog.at_level(logging.WARNING):
            work()

        assert "always_slow took" in caplog.text

    def test_slow_logging_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        """Slow logging can be turned off."""

        @performance_monitor("quiet", max_duration_ms=-1, log_slow_operations=False)
        def work() -> None:
            return None

        with caplog.at_level(logging.WARNING):
            work()

        assert "quiet" not in caplog.text

    def test_failure_logged_and_reraised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Exceptions are logged and re-raised unchanged."""

        @performance_monitor("broken")
        def work() -> None:
            raise KeyError("missing")

        with caplog.at_level(logging.ERROR), pytest.raises(KeyError):
            work()

        assert "broken failed after" in caplog.text
