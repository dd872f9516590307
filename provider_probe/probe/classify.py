"""Decision table mapping a probe outcome to a notification and breaker action.

Both functions are pure: they never touch transport, breaker or UI.

=============  ============  =============
Outcome        Notification  Reset breaker
=============  ============  =============
operational    success       yes
degraded       warning       yes
failed         error + hint  no
raised error   error + hint  no
=============  ============  =============

Degraded results clear the breaker exactly like operational ones.
"""

from __future__ import annotations

from dataclasses import dataclass

from provider_probe.constants import DEFAULT_LOCALE
from provider_probe.messages import translate
from provider_probe.notify import Notification, NotificationLevel
from provider_probe.probe.models import ProbeResult, ProbeStatus


@dataclass(frozen=True)
class ProbeDecision:
    """What the orchestrator should do with one probe outcome."""

    notification: Notification
    reset_breaker: bool


def classify(result: ProbeResult, provider_name: str, locale: str = DEFAULT_LOCALE) -> ProbeDecision:
    """Decide the notification and breaker action for a completed probe."""
    if result.status is ProbeStatus.OPERATIONAL:
        return ProbeDecision(
            notification=Notification(
                NotificationLevel.SUCCESS,
                translate(
                    "stream_check.operational",
                    locale,
                    name=provider_name,
                    time=result.response_time_ms,
                ),
            ),
            reset_breaker=True,
        )
    if result.status is ProbeStatus.DEGRADED:
        return ProbeDecision(
            notification=Notification(
                NotificationLevel.WARNING,
                translate(
                    "stream_check.degraded",
                    locale,
                    name=provider_name,
                    time=result.response_time_ms,
                ),
            ),
            reset_breaker=True,
        )
    return ProbeDecision(
        notification=Notification(
            NotificationLevel.ERROR,
            translate("stream_check.failed", locale, name=provider_name, error=result.message),
            translate("stream_check.failed_hint", locale),
        ),
        reset_breaker=False,
    )


def classify_error(
    error: BaseException, provider_name: str, locale: str = DEFAULT_LOCALE
) -> ProbeDecision:
    """Decide the notification for a probe that raised instead of returning."""
    return ProbeDecision(
        notification=Notification(
            NotificationLevel.ERROR,
            translate("stream_check.error", locale, name=provider_name, error=str(error)),
            translate("stream_check.failed_hint", locale),
        ),
        reset_breaker=False,
    )
