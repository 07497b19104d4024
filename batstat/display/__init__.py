"""Battery history viewer."""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .history import DeviceHistory, HistoryFetcher
from .table_view import HistoryView


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the history viewer."""
    from batstat.shared.config import get_log_level, load_yaml_config
    from batstat.shared.logging import setup_logging

    parser = argparse.ArgumentParser(
        prog="batstat-show", description="Show recent battery samples."
    )
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("--log-dir", help="directory holding the <battery>.db stores")
    parser.add_argument("-n", "--limit", type=int, default=10, help="rows per device (default 10)")
    args = parser.parse_args(argv)

    try:
        config = load_yaml_config(args.config)
    except (FileNotFoundError, yaml.YAMLError) as e:
        print(f"batstat-show: {e}", file=sys.stderr)
        return 1
    if not isinstance(config, dict):
        print("batstat-show: config file must contain a mapping of settings", file=sys.stderr)
        return 1
    setup_logging(get_log_level(config))

    log_dir = args.log_dir or os.getenv("BATSTAT_LOG_DIR") or config.get("log_dir")
    if not log_dir or not Path(log_dir).is_dir():
        print(f"batstat-show: log directory not found: {log_dir}", file=sys.stderr)
        return 1

    HistoryView().render(HistoryFetcher(log_dir).fetch(args.limit))
    return 0


__all__ = ["DeviceHistory", "HistoryFetcher", "HistoryView", "main"]
