"""Core data models for battery samples."""

from dataclasses import dataclass
from typing import Optional, Tuple

# Order matters: it is the column order of the log table and the order in
# which attribute files are read.
ATTRIBUTES = (
    "present",
    "cycle_count",
    "capacity",
    "charge_full",
    "charge_now",
    "current_now",
    "voltage_now",
)


@dataclass
class Sample:
    """Represents a single observation of one battery.

    Values are the raw integers published by the kernel; a field is None
    when it has never been read successfully.
    """
    time: int
    present: Optional[int]
    cycle_count: Optional[int]
    capacity: Optional[int]
    charge_full: Optional[int]
    charge_now: Optional[int]
    current_now: Optional[int]
    voltage_now: Optional[int]

    def as_row(self) -> Tuple[Optional[int], ...]:
        """Return values in insert order, time first."""
        return (self.time,) + tuple(getattr(self, name) for name in ATTRIBUTES)

    def charge_percent(self) -> Optional[float]:
        """Charge level derived from charge_now/charge_full, if known."""
        if not self.charge_full or self.charge_now is None:
            return None
        return self.charge_now * 100.0 / self.charge_full
