"""Collector settings: command-line flags, environment and YAML file."""

import argparse
import os
from dataclasses import dataclass
from typing import List, Optional

import yaml

from batstat.shared.config import get_log_level, load_yaml_config
from batstat.shared.errors import BatstatError
from batstat.collector.registry import POWER_SUPPLY_DIR

DEFAULT_INTERVAL = 1

TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigError(BatstatError):
    """Raised when the configuration cannot be used."""

    pass


@dataclass
class Config:
    log_dir: Optional[str]
    interval: int = DEFAULT_INTERVAL
    daemon: bool = False
    pidfile: Optional[str] = None
    error_log: Optional[str] = None
    log_level: str = "INFO"
    power_supply_dir: str = POWER_SUPPLY_DIR

    def validate(self) -> None:
        """Check the settings the collector cannot start without.

        Raises:
            ConfigError: On a missing log directory, a non-positive interval,
                or daemon mode without a pidfile.
        """
        if not self.log_dir:
            raise ConfigError("No log directory given (--log-dir)")
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise ConfigError(f"Interval must be a whole number of seconds, got {self.interval!r}")
        if self.interval <= 0:
            raise ConfigError(f"Interval must be positive, got {self.interval}")
        if self.daemon and not self.pidfile:
            raise ConfigError("Daemon mode requires a pidfile (--pidfile)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batstatd",
        description="Log battery telemetry from /sys/class/power_supply to SQLite.",
    )
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("--log-dir", help="directory holding one <battery>.db per device")
    parser.add_argument(
        "-i", "--interval", type=_interval, help=f"seconds between samples (default {DEFAULT_INTERVAL})"
    )
    parser.add_argument(
        "-d", "--daemon", action="store_true", default=None, help="detach and run in the background"
    )
    parser.add_argument("--pidfile", help="pidfile to create exclusively in daemon mode")
    parser.add_argument("--error-log", help="append log records to this file instead of stderr")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def _interval(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number of seconds: {value!r}")


def _to_int(name: str, value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a whole number, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigError(f"{name} must be a whole number, got {value!r}")


def _to_bool(value) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


def load_config(argv: Optional[List[str]] = None) -> Config:
    """Build the collector configuration.

    Command-line flags override environment variables (read after loading
    ``.env``), which override the YAML file, which overrides defaults.

    Args:
        argv: Command-line arguments, without the program name.

    Returns:
        The merged, unvalidated configuration.
    """
    args = build_parser().parse_args(argv)

    try:
        data = load_yaml_config(args.config)
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {args.config or os.getenv('BATSTAT_CONFIG')}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping of settings")

    return Config(
        log_dir=_first(args.log_dir, os.getenv("BATSTAT_LOG_DIR") or None, data.get("log_dir")),
        interval=_first(
            args.interval,
            _to_int("BATSTAT_INTERVAL", os.getenv("BATSTAT_INTERVAL")),
            _to_int("interval", data.get("interval")),
            DEFAULT_INTERVAL,
        ),
        daemon=bool(
            _first(
                args.daemon,
                _to_bool(os.getenv("BATSTAT_DAEMON")),
                _to_bool(data.get("daemon")),
                False,
            )
        ),
        pidfile=_first(args.pidfile, os.getenv("BATSTAT_PIDFILE") or None, data.get("pidfile")),
        error_log=_first(args.error_log, os.getenv("BATSTAT_ERROR_LOG") or None, data.get("error_log")),
        log_level=(args.log_level or os.getenv("LOG_LEVEL") or get_log_level(data)).upper(),
        power_supply_dir=data.get("power_supply_dir", POWER_SUPPLY_DIR),
    )
