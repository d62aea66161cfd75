"""Telemetry module for tracking board request performance with PostHog."""

import logging
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from posthog import Posthog

logger = logging.getLogger(__name__)

DISTINCT_ID = "morning-song-board-service"

KNOWN_SERVICES = ("song_store", "youtube")


@dataclass
class StepResult:
    """Result of a tracked step."""

    duration_ms: float
    success: bool = True
    error_type: str | None = None


@dataclass
class RequestTelemetry:
    """Tracks performance metrics for a single board request.

    Steps may run concurrently (the today and past loads overlap), so each
    step keeps its own start time.
    """

    steps: dict[str, StepResult] = field(default_factory=dict)
    api_calls: dict[str, int] = field(
        default_factory=lambda: {service: 0 for service in KNOWN_SERVICES}
    )
    start_time: float = field(default_factory=time.perf_counter)

    @contextmanager
    def track_step(self, step_name: str):
        """Context manager to time a step.

        Args:
            step_name: Name of the step being tracked

        Yields:
            None
        """
        step_start = time.perf_counter()
        error_type = None

        try:
            yield
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            self.steps[step_name] = StepResult(
                duration_ms=(time.perf_counter() - step_start) * 1000,
                success=error_type is None,
                error_type=error_type,
            )

    def record_api_call(self, service: str) -> None:
        """Increment API call counter for a service.

        Args:
            service: Name of the service ("song_store" or "youtube")
        """
        if service in self.api_calls:
            self.api_calls[service] += 1
        else:
            logger.warning(f"Unknown service for API call tracking: {service}")

    def get_total_duration_ms(self) -> float:
        """Get total elapsed time since telemetry was created."""
        return (time.perf_counter() - self.start_time) * 1000

    def get_step_timings(self) -> dict[str, float]:
        """Get timing for each step in milliseconds."""
        return {f"{name}_ms": step.duration_ms for name, step in self.steps.items()}

    def send_to_posthog(
        self,
        posthog_client: Posthog,
        event: str,
        extra_properties: dict[str, Any] | None = None,
    ) -> None:
        """Send all telemetry events to PostHog.

        Args:
            posthog_client: PostHog client instance
            event: Summary event name ("board_loaded", "board_cancel")
            extra_properties: Additional properties to include in the summary event
        """
        extra_properties = extra_properties or {}

        for step_name, step_result in self.steps.items():
            posthog_client.capture(
                distinct_id=DISTINCT_ID,
                event=f"board_{step_name}",
                properties={
                    "step": step_name,
                    "duration_ms": round(step_result.duration_ms, 2),
                    "success": step_result.success,
                    "error_type": step_result.error_type,
                },
            )

        call_stats = get_call_stats()
        posthog_client.capture(
            distinct_id=DISTINCT_ID,
            event=event,
            properties={
                "total_duration_ms": round(self.get_total_duration_ms(), 2),
                "steps": self.get_step_timings(),
                "api_calls": self.api_calls.copy(),
                "calls": call_stats.copy() if call_stats else _empty_call_stats(),
                **extra_properties,
            },
        )

        logger.debug(
            f"Sent telemetry: {len(self.steps)} steps, total {self.get_total_duration_ms():.1f}ms"
        )


# ---------------------------------------------------------------------------
# Per-request call stats via ContextVar
# ---------------------------------------------------------------------------

_call_stats_var: ContextVar[dict | None] = ContextVar("call_stats")


def _empty_call_stats() -> dict:
    return {
        "store_calls": 0,
        "store_time_ms": 0.0,
        "youtube_calls": 0,
        "youtube_misses": 0,
        "youtube_time_ms": 0.0,
    }


def init_call_stats() -> None:
    """Initialize call stats for the current request context."""
    _call_stats_var.set(_empty_call_stats())


def record_store_call(ms: float) -> None:
    """Record a song store round trip in the current request context."""
    stats = _call_stats_var.get(None)
    if stats is not None:
        stats["store_calls"] += 1
        stats["store_time_ms"] += ms


def record_youtube_call(ms: float, hit: bool) -> None:
    """Record a YouTube lookup in the current request context."""
    stats = _call_stats_var.get(None)
    if stats is not None:
        stats["youtube_calls"] += 1
        stats["youtube_time_ms"] += ms
        if not hit:
            stats["youtube_misses"] += 1


def get_call_stats() -> dict | None:
    """Get call stats for the current request context, or None if not initialized."""
    return _call_stats_var.get(None)
