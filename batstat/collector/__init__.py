"""Battery telemetry collection service."""

import logging
import sys
from typing import List, Optional

from batstat.shared.errors import BatstatError
from .collector import BatteryCollector
from .lifecycle import PidFile, ShutdownFlag, daemonize
from .registry import DeviceRegistry, NoDevicesError
from .sampler import Sampler

logger = logging.getLogger(__name__)


def run(config) -> int:
    """Run the collector with an already loaded configuration.

    Returns:
        Process exit status.
    """
    from batstat.shared.logging import setup_logging

    try:
        config.validate()
    except BatstatError as e:
        print(f"batstatd: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, log_file=config.error_log)

    pidfile = PidFile(config.pidfile) if config.daemon else None
    registry = DeviceRegistry(config.log_dir, config.power_supply_dir)
    shutdown = None
    try:
        if pidfile is not None:
            pidfile.acquire()

        registry.discover()
        if not len(registry):
            raise NoDevicesError(f"No batteries found in {config.power_supply_dir}")

        if pidfile is not None:
            daemonize(pidfile)

        shutdown = ShutdownFlag()
        shutdown.install()

        collector = BatteryCollector(registry, Sampler(), shutdown, config.interval)
        collector.run()
    except BatstatError as e:
        logger.critical(str(e))
        return 1
    except KeyboardInterrupt:
        pass
    finally:
        registry.close()
        if shutdown is not None:
            shutdown.close()
        if pidfile is not None:
            pidfile.release()
        if config.error_log:
            logging.shutdown()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for collector service."""
    from .config.settings import load_config

    try:
        config = load_config(argv)
    except BatstatError as e:
        print(f"batstatd: {e}", file=sys.stderr)
        return 1

    return run(config)


__all__ = ["BatteryCollector", "DeviceRegistry", "Sampler", "main", "run"]
