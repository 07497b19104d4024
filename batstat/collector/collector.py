"""Scheduler loop sampling every battery once per interval."""

import logging

from batstat.shared.database import WriteError
from .lifecycle import ShutdownFlag
from .registry import DeviceRegistry
from .sampler import Sampler

logger = logging.getLogger(__name__)


class BatteryCollector:
    """Samples every registered battery once per interval until shut down."""

    def __init__(
        self,
        registry: DeviceRegistry,
        sampler: Sampler,
        shutdown: ShutdownFlag,
        interval: int,
    ):
        self.registry = registry
        self.sampler = sampler
        self.shutdown = shutdown
        self.interval = interval
        self.ticks = 0

        logger.info(
            f"Initialized BatteryCollector with {len(registry)} devices, "
            f"interval={interval}s"
        )

    def tick(self) -> int:
        """Sample each device once.

        A failed device is logged and skipped; the rest of the tick carries on.
        Stops early, between devices, once shutdown has been requested.

        Returns:
            Number of rows written.
        """
        written = 0
        for device in self.registry:
            if self.shutdown.requested:
                break
            try:
                self.sampler.sample(device)
                written += 1
            except WriteError as e:
                logger.error(f"{e.device}: store error {e.code or 'unknown'}: {e.message}")
        self.ticks += 1
        return written

    def run(self) -> None:
        """Tick until shutdown is requested."""
        while not self.shutdown.requested:
            self.tick()
            if self.shutdown.wait(self.interval):
                break
