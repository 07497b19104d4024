import sqlite3
from pathlib import Path

import pytest

BATTERY_VALUES = {
    "present": "1\n",
    "cycle_count": "42\n",
    "capacity": "76\n",
    "charge_full": "4000000\n",
    "charge_now": "3040000\n",
    "current_now": "1500000\n",
    "voltage_now": "12100000\n",
}


def write_battery(root: Path, name: str, **overrides) -> Path:
    """Create a fake power_supply device directory.

    Pass ``attribute=None`` to leave an attribute file out.
    """
    device = root / name
    device.mkdir(exist_ok=True)
    values = dict(BATTERY_VALUES, **overrides)
    for attribute, content in values.items():
        path = device / attribute
        if content is None:
            if path.exists():
                path.unlink()
        else:
            path.write_text(content)
    return device


def read_rows(db_path: Path):
    conn = sqlite3.connect(str(db_path))
    try:
        conn.row_factory = sqlite3.Row
        return [dict(row) for row in conn.execute("SELECT * FROM log ORDER BY id")]
    finally:
        conn.close()


@pytest.fixture
def power_supply(tmp_path):
    root = tmp_path / "power_supply"
    root.mkdir()
    # Non-battery supplies sit next to the batteries
    ac = root / "AC"
    ac.mkdir()
    (ac / "online").write_text("1\n")
    return root


@pytest.fixture
def log_dir(tmp_path):
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BATSTAT_CONFIG",
        "BATSTAT_LOG_DIR",
        "BATSTAT_INTERVAL",
        "BATSTAT_DAEMON",
        "BATSTAT_PIDFILE",
        "BATSTAT_ERROR_LOG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
