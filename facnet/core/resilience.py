"""
resilience utilities - retry and circuit breaker for the store client.
transient failures are retried; exhausted calls fail loudly.
"""

import time
import random
import threading
import logging
from typing import TypeVar, Callable, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


logger = logging.getLogger("facnet")


T = TypeVar("T")


class CollaboratorUnavailable(Exception):
    """
    a faculty or topic fetch failed.
    reported upward as data by the agent layer, never retried by the core.
    """

    def __init__(self, message: str, source: str = "store", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.source = source
        self.cause = cause

    def __str__(self):
        return f"[{self.source}] {self.args[0]}"


class CircuitState(Enum):
    """circuit breaker states."""
    CLOSED = "closed"      # normal operation
    OPEN = "open"          # failing, reject calls
    HALF_OPEN = "half_open"  # testing recovery


@dataclass
class RetryConfig:
    """configuration for retry behavior."""
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    # exceptions that should trigger retry
    retryable_exceptions: Tuple[type, ...] = (
        ConnectionError,
        TimeoutError,
        OSError,
    )

    def delay_for(self, attempt: int) -> float:
        """backoff delay after a failed attempt (1-based)."""
        delay = min(self.base_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random())
        return delay


@dataclass
class CircuitBreakerConfig:
    """configuration for circuit breaker."""
    failure_threshold: int = 5       # failures before opening
    recovery_timeout: float = 60.0   # seconds before half-open
    half_open_max_calls: int = 3     # test calls in half-open


@dataclass
class CircuitBreaker:
    """
    circuit breaker pattern implementation.
    prevents hammering a failing store.
    """
    name: str
    config: CircuitBreakerConfig = field(default_factory=CircuitBreakerConfig)

    # state
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    last_failure_time: Optional[datetime] = None
    half_open_calls: int = 0

    def can_execute(self) -> bool:
        """check if we can make a call."""
        if self.state == CircuitState.CLOSED:
            return True

        if self.state == CircuitState.OPEN:
            if self.last_failure_time:
                elapsed = (datetime.now() - self.last_failure_time).total_seconds()
                if elapsed >= self.config.recovery_timeout:
                    logger.info(f"[circuit:{self.name}] transitioning to half-open")
                    self.state = CircuitState.HALF_OPEN
                    self.half_open_calls = 0
                    return True
            return False

        return self.half_open_calls < self.config.half_open_max_calls

    def record_success(self):
        """record successful call."""
        if self.state == CircuitState.HALF_OPEN:
            self.half_open_calls += 1
            if self.half_open_calls >= self.config.half_open_max_calls:
                logger.info(f"[circuit:{self.name}] recovery confirmed, closing")
                self.reset()
        elif self.state == CircuitState.CLOSED:
            self.failure_count = 0

    def record_failure(self, error: Exception):
        """record failed call."""
        self.failure_count += 1
        self.last_failure_time = datetime.now()

        if self.state == CircuitState.HALF_OPEN:
            logger.warning(f"[circuit:{self.name}] failure in half-open, reopening")
            self.state = CircuitState.OPEN
            self.half_open_calls = 0
        elif self.state == CircuitState.CLOSED:
            if self.failure_count >= self.config.failure_threshold:
                logger.warning(f"[circuit:{self.name}] threshold reached, opening circuit: {error}")
                self.state = CircuitState.OPEN

    def reset(self):
        """manually reset circuit breaker."""
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.half_open_calls = 0
        self.last_failure_time = None


class ResilientAPIClient:
    """
    retry + circuit breaker wrapper around a single remote call.
    raises CollaboratorUnavailable once the call cannot succeed.
    """

    def __init__(
        self,
        name: str,
        retry_config: Optional[RetryConfig] = None,
        circuit_config: Optional[CircuitBreakerConfig] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.name = name
        self.retry_config = retry_config or RetryConfig()
        self.circuit = CircuitBreaker(
            name=name,
            config=circuit_config or CircuitBreakerConfig()
        )
        self._sleep = sleep
        # guards the counters and circuit; one client serves both fetch threads
        self._lock = threading.Lock()

        # stats
        self.total_calls = 0
        self.successful_calls = 0
        self.failed_calls = 0
        self.retried_calls = 0

    def _admit(self) -> bool:
        with self._lock:
            self.total_calls += 1
            if self.circuit.can_execute():
                return True
            self.failed_calls += 1
            return False

    def _succeeded(self):
        with self._lock:
            self.circuit.record_success()
            self.successful_calls += 1

    def _failed(self, error: Exception):
        with self._lock:
            self.circuit.record_failure(error)
            self.failed_calls += 1

    def _retried(self):
        with self._lock:
            self.retried_calls += 1

    def execute(self, operation: Callable[[], T], operation_name: str = "operation") -> T:
        """
        execute operation with retry and circuit breaker.

        args:
            operation: the function to execute
            operation_name: name for logging

        returns:
            result of operation

        raises:
            CollaboratorUnavailable when the circuit is open, retries are
            exhausted, or the operation fails with a non-retryable error
        """
        if not self._admit():
            logger.warning(f"[{self.name}] circuit open, skipping {operation_name}")
            raise CollaboratorUnavailable(f"circuit open for {operation_name}", source=self.name)

        for attempt in range(1, self.retry_config.max_attempts + 1):
            try:
                result = operation()
                self._succeeded()
                return result

            except self.retry_config.retryable_exceptions as e:
                self._retried()

                if attempt == self.retry_config.max_attempts:
                    self._failed(e)
                    logger.warning(
                        f"[{self.name}] {operation_name} failed after "
                        f"{attempt} attempts: {e}"
                    )
                    raise CollaboratorUnavailable(
                        f"{operation_name} failed after {attempt} attempts: {e}",
                        source=self.name,
                        cause=e
                    ) from e

                delay = self.retry_config.delay_for(attempt)
                logger.info(
                    f"[{self.name}] {operation_name} attempt {attempt} failed, "
                    f"retrying in {delay:.1f}s"
                )
                self._sleep(delay)

            except CollaboratorUnavailable:
                self._failed(RuntimeError(operation_name))
                raise

            except Exception as e:
                # non-retryable - bad request or bad payload, not a service blip
                self._failed(e)
                logger.warning(f"[{self.name}] {operation_name} error: {e}")
                raise CollaboratorUnavailable(
                    f"{operation_name} failed: {e}", source=self.name, cause=e
                ) from e

        # max_attempts < 1
        raise CollaboratorUnavailable(f"{operation_name} was never attempted", source=self.name)

    def stats(self) -> dict:
        """get client statistics."""
        with self._lock:
            return {
                "name": self.name,
                "total_calls": self.total_calls,
                "successful_calls": self.successful_calls,
                "failed_calls": self.failed_calls,
                "retried_calls": self.retried_calls,
                "success_rate": (
                    self.successful_calls / self.total_calls
                    if self.total_calls > 0 else 0
                ),
                "circuit_state": self.circuit.state.value,
                "circuit_failures": self.circuit.failure_count
            }


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None
):
    """
    setup facnet logging.
    call once at startup.
    """
    formatter = logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger
