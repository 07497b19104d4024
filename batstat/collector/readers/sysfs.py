"""Readers for sysfs attribute files."""

import logging
import re
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Attribute files hold a single value; anything longer is not ours.
MAX_ATTRIBUTE_SIZE = 256

# Plain decimal, optionally negative (current_now goes negative on some
# platforms while discharging).
DECIMAL_RE = re.compile(r"-?[0-9]+")

# Range of an SQLite INTEGER
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def read_attribute(path: Union[str, Path]) -> Optional[str]:
    """Read a sysfs attribute file and return its trimmed content.

    Args:
        path: Attribute file to read.

    Returns:
        The stripped file content, or None if the file could not be read or
        is longer than MAX_ATTRIBUTE_SIZE.
    """
    try:
        with open(path, "r") as f:
            content = f.read(MAX_ATTRIBUTE_SIZE + 1)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Failed to read {path}: {e}")
        return None

    if len(content) > MAX_ATTRIBUTE_SIZE:
        logger.debug(f"Ignoring {path}: longer than {MAX_ATTRIBUTE_SIZE} characters")
        return None
    return content.strip()


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a decimal integer attribute value.

    Returns None unless the value is a plain decimal integer that fits in a
    64-bit signed column.
    """
    if value is None or not DECIMAL_RE.fullmatch(value):
        return None
    number = int(value, 10)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def read_int_attribute(path: Union[str, Path]) -> Optional[int]:
    """Read an attribute file holding a decimal integer."""
    return parse_int(read_attribute(path))
