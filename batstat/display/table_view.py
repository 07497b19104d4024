"""
Table view for battery history.
Renders one Rich table per device, newest sample first.
"""

from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .history import DeviceHistory


def _fmt(value: Optional[int], scale: float = 1.0, precision: int = 0) -> str:
    if value is None:
        return "-"
    if scale == 1.0:
        return str(value)
    return f"{value / scale:.{precision}f}"


class HistoryView:
    """Prints device histories to a Rich console"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, histories: List[DeviceHistory]) -> None:
        if not histories:
            self.console.print(Text("No battery logs found", style="yellow"))
            return
        for history in histories:
            self.console.print(self._create_table(history))

    def _create_table(self, history: DeviceHistory) -> Table:
        title = f"{history.name} - {history.row_count} samples"
        table = Table(title=title, header_style="bold cyan")

        if history.error:
            table.add_column("Error", style="red")
            table.add_row(history.error)
            return table

        table.add_column("Time", style="white")
        table.add_column("Present", justify="center")
        table.add_column("Capacity %", justify="right")
        table.add_column("Charge %", justify="right")
        table.add_column("Cycles", justify="right")
        table.add_column("Voltage (V)", justify="right")
        table.add_column("Current (A)", justify="right")

        for sample in history.samples:
            charge = sample.charge_percent()
            table.add_row(
                datetime.fromtimestamp(sample.time).strftime("%Y-%m-%d %H:%M:%S"),
                "yes" if sample.present else "no",
                _fmt(sample.capacity),
                f"{charge:.1f}" if charge is not None else "-",
                _fmt(sample.cycle_count),
                # sysfs reports microvolts and microamps
                _fmt(sample.voltage_now, 1_000_000, 3),
                _fmt(sample.current_now, 1_000_000, 3),
            )
        return table
