"""Circuit breaker guarding calls to the routing provider."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Any, TypeVar

from .errors import ProviderUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states"""

    CLOSED = "closed"  # Normal operation, requests allowed
    OPEN = "open"  # Provider considered down, requests rejected
    HALF_OPEN = "half_open"  # Cooldown elapsed, probing the provider


@dataclass
class CircuitBreakerStats:
    """Statistics for circuit breaker monitoring"""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    rejected_calls: int = 0
    last_failure_time: float | None = None
    last_success_time: float | None = None
    consecutive_failures: int = 0
    circuit_opened_count: int = 0


class CircuitOpenError(ProviderUnavailable):
    """Raised instead of calling the provider while the circuit is open."""


class CircuitBreaker:
    """
    Circuit breaker to stop hammering a provider that keeps failing.

    The circuit breaker has three states:
    - CLOSED: Normal operation, all requests pass through
    - OPEN: After failure threshold, requests are immediately rejected
    - HALF_OPEN: After cooldown, requests probe the provider again
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        cooldown_seconds: float = 60.0,
        success_threshold: int = 1,
        enabled: bool = True,
        ignored_exceptions: tuple[type[Exception], ...] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize circuit breaker.

        Args:
            name: Identifier for this circuit breaker
            failure_threshold: Number of consecutive failures before opening circuit
            cooldown_seconds: Time to wait before attempting recovery
            success_threshold: Successes needed in half-open state to close circuit
            enabled: Whether circuit breaker is active
            ignored_exceptions: Exceptions that propagate without counting as failures
            clock: Time source, injectable for tests
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self.success_threshold = success_threshold
        self.enabled = enabled
        self.ignored_exceptions = ignored_exceptions
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._stats = CircuitBreakerStats()
        self._lock = Lock()
        self._last_state_change = self._clock()
        self._half_open_successes = 0

    @property
    def state(self) -> CircuitState:
        """Get current circuit state, checking for automatic transitions."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                if self._clock() - self._last_state_change >= self.cooldown_seconds:
                    self._transition_to(CircuitState.HALF_OPEN)
            return self._state

    @property
    def stats(self) -> CircuitBreakerStats:
        return self._stats

    def _transition_to(self, new_state: CircuitState) -> None:
        old_state = self._state
        self._state = new_state
        self._last_state_change = self._clock()

        if new_state == CircuitState.OPEN:
            self._stats.circuit_opened_count += 1
            logger.warning(
                "Circuit breaker '%s' opened after %d consecutive failures",
                self.name,
                self._stats.consecutive_failures,
            )
        elif new_state == CircuitState.CLOSED:
            self._stats.consecutive_failures = 0
            self._half_open_successes = 0
            if old_state == CircuitState.HALF_OPEN:
                logger.info("Circuit breaker '%s' closed after successful recovery", self.name)
        elif new_state == CircuitState.HALF_OPEN:
            self._half_open_successes = 0
            logger.info("Circuit breaker '%s' entering half-open state for testing", self.name)

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Await a coroutine function through the circuit breaker.

        Raises:
            CircuitOpenError: If circuit is open
            Original exception: If func fails
        """
        if not self.enabled:
            return await func(*args, **kwargs)

        if self.state == CircuitState.OPEN:
            self._stats.rejected_calls += 1
            raise CircuitOpenError(
                f"Circuit breaker '{self.name}' is open. "
                f"Provider will be retried after {self.cooldown_seconds} seconds."
            )

        try:
            result = await func(*args, **kwargs)
        except self.ignored_exceptions:
            self._on_success()
            raise
        except asyncio.CancelledError:
            # a call abandoned by its caller, e.g. on timeout, counts as a failure
            self._on_failure()
            raise
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _on_success(self) -> None:
        with self._lock:
            self._stats.total_calls += 1
            self._stats.successful_calls += 1
            self._stats.last_success_time = self._clock()
            self._stats.consecutive_failures = 0

            if self._state == CircuitState.HALF_OPEN:
                self._half_open_successes += 1
                if self._half_open_successes >= self.success_threshold:
                    self._transition_to(CircuitState.CLOSED)

    def _on_failure(self) -> None:
        with self._lock:
            self._stats.total_calls += 1
            self._stats.failed_calls += 1
            self._stats.last_failure_time = self._clock()
            self._stats.consecutive_failures += 1

            if self._state == CircuitState.HALF_OPEN:
                # Failure in half-open state immediately opens circuit
                self._transition_to(CircuitState.OPEN)
            elif (
                self._state == CircuitState.CLOSED
                and self._stats.consecutive_failures >= self.failure_threshold
            ):
                self._transition_to(CircuitState.OPEN)

    def reset(self) -> None:
        """Manually reset the circuit breaker to closed state."""
        with self._lock:
            self._state = CircuitState.CLOSED
            self._stats.consecutive_failures = 0
            self._half_open_successes = 0
            self._last_state_change = self._clock()
            logger.info("Circuit breaker '%s' manually reset", self.name)

    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    def is_closed(self) -> bool:
        return self.state == CircuitState.CLOSED


_circuit_breakers: dict[str, CircuitBreaker] = {}
_breakers_lock = Lock()


def get_circuit_breaker(name: str = "routing_provider", **kwargs: Any) -> CircuitBreaker:
    """
    Get or create a named circuit breaker.

    Keyword arguments only apply when the breaker is first created.
    """
    with _breakers_lock:
        if name not in _circuit_breakers:
            _circuit_breakers[name] = CircuitBreaker(name, **kwargs)
        return _circuit_breakers[name]


__all__ = [
    "CircuitBreaker",
    "CircuitBreakerStats",
    "CircuitOpenError",
    "CircuitState",
    "get_circuit_breaker",
]
