"""Sampling of a single battery into its log store."""

import logging
import time
from typing import Callable

from batstat.shared.database import WriteError
from batstat.shared.models import ATTRIBUTES, Sample
from .readers.sysfs import read_int_attribute
from .registry import Device

logger = logging.getLogger(__name__)


class Sampler:
    """Reads every tracked attribute of a device and appends one row.

    A field that cannot be read or parsed on a given tick falls back to the
    device's last good value for that field. If there has never been one it
    stays None, which the store accepts only for nullable columns.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    def read(self, device: Device) -> Sample:
        """Read all attributes of ``device`` into a timestamped sample."""
        values = {}
        for attribute, path in zip(ATTRIBUTES, device.attribute_paths):
            value = read_int_attribute(path)
            if value is None:
                value = device.last_values.get(attribute)
                if value is not None:
                    logger.warning(
                        f"{device.name}: could not read {attribute}, "
                        f"using last value {value}"
                    )
                elif attribute not in device.unavailable:
                    device.unavailable.add(attribute)
                    logger.warning(
                        f"{device.name}: could not read {attribute} "
                        f"and there is no previous value"
                    )
            else:
                device.last_values[attribute] = value
                device.unavailable.discard(attribute)
            values[attribute] = value

        # One timestamp per tick, taken after every read has completed
        return Sample(time=int(self.clock()), **values)

    def sample(self, device: Device) -> Sample:
        """Read ``device`` and append the sample to its store.

        Returns:
            The sample that was written.

        Raises:
            WriteError: If the store rejected the row.
        """
        sample = self.read(device)
        if device.store is None:
            raise WriteError(device.name, "store is not open")
        device.store.append(sample)
        logger.debug(f"{device.name}: logged {sample}")
        return sample
