"""Tests for the decision table, probe result model, in-flight set and messages."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from provider_probe.errors import ProbeTransportError
from provider_probe.messages import SUPPORTED_LOCALES, translate
from provider_probe.notify import LoggingNotifier, NotificationLevel
from provider_probe.probe.classify import classify, classify_error
from provider_probe.probe.inflight import InFlightSet
from provider_probe.probe.models import ProbeResult, ProbeStatus, ProviderProbeKey

# ── Decision table ───────────────────────────────────────────────────────


class TestClassify:
    def test_operational(self):
        d = classify(ProbeResult.operational(250), "Alpha")
        assert d.reset_breaker is True
        assert d.notification.level is NotificationLevel.SUCCESS
        assert d.notification.message == "Alpha is operational (250ms)"
        assert d.notification.description is None

    def test_degraded_resets_breaker(self):
        d = classify(ProbeResult.degraded(8000), "Alpha")
        assert d.reset_breaker is True
        assert d.notification.level is NotificationLevel.WARNING
        assert "8000ms" in d.notification.message

    def test_failed(self):
        d = classify(ProbeResult.failed("HTTP 503"), "Alpha")
        assert d.reset_breaker is False
        assert d.notification.level is NotificationLevel.ERROR
        assert d.notification.message == "Alpha check failed: HTTP 503"
        assert d.notification.description == translate("stream_check.failed_hint")

    def test_error(self):
        d = classify_error(ProbeTransportError("refused"), "Alpha")
        assert d.reset_breaker is False
        assert d.notification.level is NotificationLevel.ERROR
        assert "refused" in d.notification.message
        assert d.notification.description == translate("stream_check.failed_hint")

    def test_zh_locale(self):
        d = classify(ProbeResult.operational(10), "阿尔法", locale="zh")
        assert d.notification.message == "阿尔法 运行正常 (10ms)"

    def test_classification_is_pure(self):
        result = ProbeResult.failed("x")
        assert classify(result, "A") == classify(result, "A")


# ── Probe result model ───────────────────────────────────────────────────


class TestProbeResult:
    def test_failed_requires_message(self):
        with pytest.raises(ValidationError):
            ProbeResult(status=ProbeStatus.FAILED)

    def test_operational_requires_response_time(self):
        with pytest.raises(ValidationError):
            ProbeResult(status=ProbeStatus.OPERATIONAL)

    def test_negative_response_time_rejected(self):
        with pytest.raises(ValidationError):
            ProbeResult.operational(-1)

    def test_ok(self):
        assert ProbeResult.operational(1).ok
        assert ProbeResult.degraded(1).ok
        assert not ProbeResult.failed("x").ok

    def test_frozen(self):
        r = ProbeResult.operational(1)
        with pytest.raises(ValidationError):
            r.response_time_ms = 2

    def test_key_hashable(self):
        a = ProviderProbeKey(application_id="claude", provider_id="p1")
        b = ProviderProbeKey(application_id="claude", provider_id="p1")
        assert a == b
        assert len({a, b}) == 1

    def test_key_requires_provider_id(self):
        with pytest.raises(ValidationError):
            ProviderProbeKey(application_id="claude", provider_id="")


# ── In-flight set ────────────────────────────────────────────────────────


class TestInFlightSet:
    def test_with_key_returns_new_snapshot(self):
        empty = InFlightSet()
        one = empty.with_key("p1")
        assert "p1" in one
        assert "p1" not in empty
        assert one is not empty

    def test_without_key_idempotent(self):
        s = InFlightSet(["p1"])
        removed = s.without_key("p1")
        assert len(removed) == 0
        assert removed.without_key("p1") is removed
        assert "p1" in s

    def test_iteration_is_sorted(self):
        assert list(InFlightSet(["b", "a", "c"])) == ["a", "b", "c"]

    def test_equality(self):
        assert InFlightSet(["a"]) == InFlightSet(["a"])
        assert InFlightSet(["a"]) != InFlightSet(["b"])


# ── Messages and log notifier ────────────────────────────────────────────


class TestMessages:
    def test_locales(self):
        assert set(SUPPORTED_LOCALES) == {"en", "zh"}

    def test_unknown_locale_falls_back_to_english(self):
        assert translate("stream_check.failed", "fr", name="A", error="e") == "A check failed: e"

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            translate("does.not.exist")


class TestLoggingNotifier:
    def test_levels(self, caplog):
        notifier = LoggingNotifier()
        with caplog.at_level("INFO", logger="provider_probe.notify"):
            notifier.notify(NotificationLevel.SUCCESS, "ok")
            notifier.notify(NotificationLevel.ERROR, "bad", "hint")
        levels = [r.levelname for r in caplog.records]
        assert levels == ["INFO", "ERROR"]
        assert "bad (hint)" in caplog.text
