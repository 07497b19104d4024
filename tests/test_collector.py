import itertools
import logging

import pytest

from batstat.collector.collector import BatteryCollector
from batstat.collector.lifecycle import ShutdownFlag
from batstat.collector.registry import DeviceRegistry
from batstat.collector.sampler import Sampler
from tests.conftest import read_rows, write_battery


@pytest.fixture
def shutdown():
    flag = ShutdownFlag()
    yield flag
    flag.close()


@pytest.fixture
def registry(power_supply, log_dir):
    write_battery(power_supply, "BAT0")
    write_battery(power_supply, "BAT1")
    registry = DeviceRegistry(log_dir, power_supply)
    registry.discover()
    yield registry
    registry.close()


def make_clock(start=1700000000):
    counter = itertools.count(start)
    return lambda: next(counter)


def test_n_ticks_write_n_rows_per_device(registry, shutdown, log_dir):
    collector = BatteryCollector(registry, Sampler(clock=make_clock()), shutdown, interval=1)

    for _ in range(4):
        assert collector.tick() == 2

    for name in ("BAT0", "BAT1"):
        times = [row["time"] for row in read_rows(log_dir / f"{name}.db")]
        assert len(times) == 4
        assert times == sorted(times)


def test_failing_device_does_not_stop_others(power_supply, log_dir, shutdown, caplog):
    write_battery(power_supply, "BAT0", voltage_now=None)
    write_battery(power_supply, "BAT1")

    with DeviceRegistry(log_dir, power_supply) as registry:
        registry.discover()
        collector = BatteryCollector(registry, Sampler(clock=make_clock()), shutdown, interval=1)

        with caplog.at_level(logging.ERROR):
            assert collector.tick() == 1
        assert "BAT0: store error" in caplog.text
        assert len(read_rows(log_dir / "BAT0.db")) == 0
        assert len(read_rows(log_dir / "BAT1.db")) == 1

        # The failing device recovers on the next tick
        write_battery(power_supply, "BAT0")
        assert collector.tick() == 2
        assert len(read_rows(log_dir / "BAT0.db")) == 1
        assert len(read_rows(log_dir / "BAT1.db")) == 2


class StoppingSampler(Sampler):
    """Requests shutdown after its first sample, as a signal mid-tick would."""

    def __init__(self, shutdown):
        super().__init__(clock=make_clock())
        self.shutdown = shutdown

    def sample(self, device):
        sample = super().sample(device)
        self.shutdown.request()
        return sample


def test_shutdown_mid_tick_stops_between_devices(registry, shutdown, log_dir):
    collector = BatteryCollector(registry, StoppingSampler(shutdown), shutdown, interval=60)

    collector.run()

    counts = sorted(len(read_rows(log_dir / f"{name}.db")) for name in ("BAT0", "BAT1"))
    assert counts == [0, 1]
    assert collector.ticks == 1

    stores = [device.store for device in registry]
    registry.close()
    assert not any(store.is_open for store in stores)


def test_run_exits_immediately_when_shutdown_already_requested(registry, shutdown, log_dir):
    shutdown.request()
    collector = BatteryCollector(registry, Sampler(), shutdown, interval=60)

    collector.run()

    assert collector.ticks == 0
    assert read_rows(log_dir / "BAT0.db") == []


def test_out_of_range_value_does_not_stop_others(power_supply, log_dir, shutdown):
    write_battery(power_supply, "BAT0", charge_now="99999999999999999999\n")
    write_battery(power_supply, "BAT1")

    with DeviceRegistry(log_dir, power_supply) as registry:
        registry.discover()
        collector = BatteryCollector(registry, Sampler(clock=make_clock()), shutdown, interval=1)

        assert collector.tick() == 1
        assert len(read_rows(log_dir / "BAT0.db")) == 0
        assert len(read_rows(log_dir / "BAT1.db")) == 1

        assert collector.tick() == 1
        assert len(read_rows(log_dir / "BAT1.db")) == 2
