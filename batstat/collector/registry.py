"""Discovery of battery devices and ownership of their log stores."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Union

from batstat.shared.database import LogStore, StoreError, initialize_schema
from batstat.shared.errors import BatstatError
from batstat.shared.models import ATTRIBUTES

logger = logging.getLogger(__name__)

POWER_SUPPLY_DIR = "/sys/class/power_supply"
BATTERY_PREFIX = "BAT"


class DiscoveryError(BatstatError):
    """Raised when the power supply class directory cannot be listed."""

    pass


class DeviceOpenError(BatstatError):
    """Raised when a discovered device's store cannot be created or opened."""

    pass


class NoDevicesError(BatstatError):
    """Raised when discovery finds no batteries."""

    pass


@dataclass
class Device:
    """One tracked battery and the resources it owns."""
    name: str
    sys_path: Path
    db_path: Path
    store: Optional[LogStore] = None
    last_values: Dict[str, int] = field(default_factory=dict)
    # Attributes already reported as having no value to fall back on
    unavailable: Set[str] = field(default_factory=set)

    @property
    def attribute_paths(self) -> List[Path]:
        return [self.sys_path / attribute for attribute in ATTRIBUTES]

    def open(self) -> None:
        """Attach the device's store, creating and initializing it on first use.

        Raises:
            DeviceOpenError: If the store cannot be created or opened.
        """
        try:
            if not self.db_path.exists():
                initialize_schema(self.db_path)
            self.store = LogStore.open_for_append(self.db_path, self.name)
        except StoreError as e:
            raise DeviceOpenError(f"Cannot open log store for {self.name}: {e}") from e

    def close(self) -> None:
        if self.store is not None:
            self.store.close()
            self.store = None


class DeviceRegistry:
    """Owns every discovered device and releases them in one place."""

    def __init__(
        self,
        log_dir: Union[str, Path],
        power_supply_dir: Union[str, Path] = POWER_SUPPLY_DIR,
    ):
        self.log_dir = Path(log_dir)
        self.power_supply_dir = Path(power_supply_dir)
        self.devices: List[Device] = []

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices)

    def __len__(self) -> int:
        return len(self.devices)

    def __enter__(self) -> "DeviceRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _scan(self) -> List[str]:
        try:
            with os.scandir(self.power_supply_dir) as entries:
                names = [entry.name for entry in entries]
        except OSError as e:
            raise DiscoveryError(
                f"Cannot read {self.power_supply_dir}: {e.strerror or e}"
            ) from e
        return sorted(
            name for name in names
            if name not in (".", "..") and name.startswith(BATTERY_PREFIX)
        )

    def discover(self) -> List[Device]:
        """Find every battery and open its log store.

        Returns:
            The discovered devices, each with an open store.

        Raises:
            DiscoveryError: If the class directory cannot be listed.
            DeviceOpenError: If any store cannot be opened; stores opened so
                far are closed before the error propagates.
        """
        for name in self._scan():
            device = Device(
                name=name,
                sys_path=(self.power_supply_dir / name).absolute(),
                db_path=(self.log_dir / f"{name}.db").absolute(),
            )
            try:
                device.open()
            except DeviceOpenError:
                self.close()
                raise
            self.devices.append(device)
            logger.info(f"Tracking {name} -> {device.db_path}")

        return self.devices

    def close(self) -> None:
        """Release every device's store; safe to call more than once."""
        for device in self.devices:
            device.close()
        self.devices = []
