"""On-demand probe orchestration for the providers of one application.

The orchestrator tracks which providers are being probed, runs the probe
client, turns the outcome into exactly one notification and, when the
provider proved reachable, clears its circuit breaker.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Protocol, Set

from provider_probe.constants import DEFAULT_LOCALE
from provider_probe.notify import Notifier
from provider_probe.probe.classify import ProbeDecision, classify, classify_error
from provider_probe.probe.inflight import InFlightSet
from provider_probe.probe.models import ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)


class ProbeClient(Protocol):
    """Performs one probe call; raises when the call cannot complete."""

    async def probe(self, application_id: str, provider_id: str) -> ProbeResult: ...


class BreakerResetter(Protocol):
    """Clears the failure state of a provider's circuit breaker."""

    def reset(self, provider_id: str, application_id: str) -> Any: ...


class ProbeOrchestrator:
    """Runs user-triggered probes for one application.

    Parameters
    ----------
    application_id:
        The application whose providers are probed.
    client:
        :class:`ProbeClient` performing the actual call. It owns any timeout.
    breakers:
        :class:`BreakerResetter` reset after operational or degraded results.
    notifier:
        Receives one notification per probe.
    locale:
        Message catalogue used for notification texts.
    on_in_flight_change:
        Optional callback receiving every new :class:`InFlightSet` snapshot.
    """

    def __init__(
        self,
        application_id: str,
        client: ProbeClient,
        breakers: BreakerResetter,
        notifier: Notifier,
        *,
        locale: str = DEFAULT_LOCALE,
        on_in_flight_change: Optional[Callable[[InFlightSet], Any]] = None,
    ) -> None:
        self._application_id = application_id
        self._client = client
        self._breakers = breakers
        self._notifier = notifier
        self._locale = locale
        self._on_in_flight_change = on_in_flight_change

        self._in_flight = InFlightSet()
        self._background_tasks: Set[asyncio.Future[Any]] = set()

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def application_id(self) -> str:
        return self._application_id

    @property
    def in_flight(self) -> InFlightSet:
        """Current snapshot of providers being probed."""
        return self._in_flight

    def is_checking(self, provider_id: str) -> bool:
        """Whether a probe for *provider_id* has started and not yet settled."""
        return provider_id in self._in_flight

    async def begin_probe(self, provider_id: str, provider_name: str) -> Optional[ProbeResult]:
        """Probe one provider and report the outcome.

        Returns the :class:`ProbeResult`, or ``None`` when the probe client
        raised instead of returning a result. Never raises for probe
        failures; the in-flight mark is cleared on every exit path.
        """
        self._swap(self._in_flight.with_key(provider_id))
        logger.info("[%s/%s] Probe started", self._application_id, provider_id)
        try:
            try:
                result = await self._client.probe(self._application_id, provider_id)
            except Exception as exc:
                logger.warning(
                    "[%s/%s] Probe could not complete: %s",
                    self._application_id,
                    provider_id,
                    exc,
                )
                self._execute(provider_id, classify_error(exc, provider_name, self._locale))
                return None

            if result.status is ProbeStatus.FAILED:
                detail = result.message
            else:
                detail = f"{result.response_time_ms}ms"
            logger.info(
                "[%s/%s] Probe finished: %s (%s)",
                self._application_id,
                provider_id,
                result.status.value,
                detail,
            )
            self._execute(provider_id, classify(result, provider_name, self._locale))
            return result
        finally:
            self._swap(self._in_flight.without_key(provider_id))

    # ── Effects ──────────────────────────────────────────────────────────

    def _execute(self, provider_id: str, decision: ProbeDecision) -> None:
        note = decision.notification
        try:
            self._notifier.notify(note.level, note.message, note.description)
        except Exception:
            logger.warning(
                "[%s/%s] Notification delivery failed",
                self._application_id,
                provider_id,
                exc_info=True,
            )
        if decision.reset_breaker:
            self._reset_breaker(provider_id)

    def _reset_breaker(self, provider_id: str) -> None:
        """Fire-and-forget breaker reset; the probe result does not depend on it."""
        try:
            outcome = self._breakers.reset(provider_id, self._application_id)
        except Exception:
            logger.warning(
                "[%s/%s] Circuit breaker reset failed",
                self._application_id,
                provider_id,
                exc_info=True,
            )
            return
        if inspect.isawaitable(outcome):
            task = asyncio.ensure_future(outcome)
            self._background_tasks.add(task)
            task.add_done_callback(self._reset_done)

    def _reset_done(self, task: "asyncio.Future[Any]") -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(
                "[%s] Circuit breaker reset failed: %s",
                self._application_id,
                exc,
            )

    def _swap(self, snapshot: InFlightSet) -> None:
        self._in_flight = snapshot
        if self._on_in_flight_change is not None:
            try:
                self._on_in_flight_change(snapshot)
            except Exception:
                logger.debug("on_in_flight_change callback error", exc_info=True)
