"""
Simulated remote boundary.

Every record operation is called through `SimulatedNetwork.call`, which
waits a random latency and then, with a fixed probability, fails instead of
running the operation. The failure draw happens before the operation is
invoked, so a failed call never writes anything.

Usage:
    from core.simulation import SimulatedNetwork

    network = SimulatedNetwork.from_settings()
    job = await network.call(job_service.get_job, store, "job-1")
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

from core.config import settings
from core.exceptions import SimulatedTransientFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SimulatedNetwork:
    """Latency and failure injection in front of local operations."""

    def __init__(
        self,
        latency_min_ms: int = 200,
        latency_max_ms: int = 1200,
        failure_rate: float = 0.08,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the simulated network.

        Args:
            latency_min_ms: Lower bound of the injected delay
            latency_max_ms: Upper bound of the injected delay
            failure_rate: Probability in [0, 1] that a call fails
            rng: Random source; a private `random.Random()` when omitted
            sleep: Coroutine used to wait, in seconds
        """
        if latency_min_ms < 0 or latency_max_ms < latency_min_ms:
            raise ValueError("Latency bounds must satisfy 0 <= min <= max")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("Failure rate must be between 0 and 1")
        self.latency_min_ms = latency_min_ms
        self.latency_max_ms = latency_max_ms
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, **overrides: Any) -> "SimulatedNetwork":
        """Build a network from the global settings."""
        options = {
            "latency_min_ms": settings.latency_min_ms,
            "latency_max_ms": settings.latency_max_ms,
            "failure_rate": settings.failure_rate,
        }
        options.update(overrides)
        return cls(**options)

    def draw_latency(self) -> float:
        """Pick the delay for one call, in seconds."""
        return self._rng.uniform(self.latency_min_ms, self.latency_max_ms) / 1000.0

    def should_fail(self) -> bool:
        """Independent failure draw for one call."""
        return self._rng.random() < self.failure_rate

    async def call(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        failure_message: str = "Simulated API failure",
        inject_failure: bool = True,
        **kwargs: Any,
    ) -> T:
        """
        Run `operation` behind the simulated network.

        Args:
            operation: Coroutine function to invoke
            failure_message: Message carried by an injected failure
            inject_failure: Set to False for calls that only get latency

        Returns:
            Whatever the operation returns; its exceptions propagate unchanged

        Raises:
            SimulatedTransientFailure: When the failure draw hits
        """
        await self._sleep(self.draw_latency())

        if inject_failure and self.should_fail():
            name = getattr(operation, "__name__", repr(operation))
            logger.warning(f"Injected failure for {name}: {failure_message}")
            raise SimulatedTransientFailure(failure_message)

        return await operation(*args, **kwargs)
