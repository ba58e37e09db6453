"""
Nested timing instrumentation for a single traced operation.

Usage::

    profiler = profiler_factory.create()
    profiler.push("mute")
    profiler.push("fetch_target")
    ...
    profiler.pop()
    return profiler.report_with_result(result)

``push`` starts a timer nested under every still-running one and ``pop``
stops the most recently started running timer. Reporting force-stops
whatever is still running, then logs one warning with the per-event
breakdown when the first (root) timer took at least the threshold.

A profiler is single-use and belongs to one flow; create a new one per
operation.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TypeVar

from wardcord.datatypes.errors import ProfilerProtocolError
from wardcord.util.logger import get_logger

logger = get_logger("profiler")

T = TypeVar("T")

DEFAULT_THRESHOLD_MS = 10.0
INDENT = " " * 4


@dataclass(slots=True)
class ProfilerEvent:
    id: str
    nesting_level: int
    start_time: float
    stop_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self.stop_time is None

    @property
    def elapsed_ms(self) -> float:
        if self.stop_time is None:
            raise ProfilerProtocolError(f"Event {self.id!r} is still running")
        return (self.stop_time - self.start_time) * 1000


@dataclass(frozen=True, slots=True)
class ProfilerReport:
    """What a slow profiler logs: the root timing and every nested event."""

    root_id: str
    elapsed_ms: float
    threshold_ms: float
    events: Tuple[ProfilerEvent, ...]
    unprofiled_ms: float

    def format_events(self) -> str:
        lines = [""]
        for event in self.events:
            lines.append(f"{INDENT * event.nesting_level}{event.id}: {int(event.elapsed_ms)}ms")
        if self.unprofiled_ms > 0:
            lines.append(f"<unprofiled>: {int(self.unprofiled_ms)}ms")
        return "\n".join(lines)


class Profiler:
    def __init__(
        self,
        log: logging.Logger = logger,
        threshold_ms: float = DEFAULT_THRESHOLD_MS,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._log = log
        self._threshold_ms = threshold_ms
        self._clock = clock
        self._events: List[ProfilerEvent] = []
        self._running = 0

    @property
    def events(self) -> Tuple[ProfilerEvent, ...]:
        return tuple(self._events)

    @property
    def running_count(self) -> int:
        return self._running

    def push(self, event_id: str) -> None:
        """Start a timer nested under all currently running ones."""
        self._running += 1
        self._events.append(ProfilerEvent(event_id, self._running - 1, self._clock()))

    def pop(self) -> None:
        """
        Stop the most recently started timer that is still running.

        Raises:
            ProfilerProtocolError: If no timer is running.
        """
        if self._running == 0:
            raise ProfilerProtocolError("Nothing to pop")

        self._running -= 1
        now = self._clock()
        for event in reversed(self._events):
            if event.running:
                event.stop_time = now
                return

    def pop_with_result(self, result: T) -> T:
        self.pop()
        return result

    def pop_and_report(self) -> Optional[ProfilerReport]:
        """Stop every running timer (newest first), then report.

        Returns the report that was logged, or None when the root timer
        stayed under the threshold.
        """
        while self._running > 0:
            self.pop()
        return self._report()

    def report_with_result(self, result: T) -> T:
        self.pop_and_report()
        return result

    def report_with_success(self) -> None:
        self.pop_and_report()

    def _report(self) -> Optional[ProfilerReport]:
        if not self._events:
            return None

        root = self._events[0]
        if root.elapsed_ms < self._threshold_ms:
            return None

        # Every nested event is subtracted, grandchildren included.
        children = tuple(self._events[1:])
        unprofiled = root.elapsed_ms - sum(event.elapsed_ms for event in children)
        report = ProfilerReport(root.id, root.elapsed_ms, self._threshold_ms, children, unprofiled)

        self._log.warning(
            "Profiler %s took %d milliseconds to execute (max: %dms):%s",
            root.id,
            int(root.elapsed_ms),
            int(self._threshold_ms),
            report.format_events(),
        )
        return report


class ProfilerFactory:
    """Hands out fresh profilers sharing one logger and threshold."""

    def __init__(
        self,
        threshold_ms: float = DEFAULT_THRESHOLD_MS,
        log: logging.Logger = logger,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.threshold_ms = threshold_ms
        self._log = log
        self._clock = clock

    def create(self) -> Profiler:
        return Profiler(self._log, self.threshold_ms, self._clock)
