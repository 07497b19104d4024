"""Shared utilities for batstat services."""

from .models import ATTRIBUTES, Sample
from .database import (
    LogStore,
    SchemaError,
    StoreError,
    StoreOpenError,
    WriteError,
    initialize_schema,
)
from .config import load_yaml_config, get_config_path
from .errors import BatstatError
from .logging import setup_logging

__all__ = [
    "ATTRIBUTES",
    "Sample",
    "LogStore",
    "SchemaError",
    "StoreError",
    "StoreOpenError",
    "WriteError",
    "initialize_schema",
    "load_yaml_config",
    "get_config_path",
    "BatstatError",
    "setup_logging",
]
