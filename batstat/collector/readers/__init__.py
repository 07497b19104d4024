"""Attribute readers for data collection."""

from .sysfs import parse_int, read_attribute, read_int_attribute

__all__ = [
    "parse_int",
    "read_attribute",
    "read_int_attribute",
]
