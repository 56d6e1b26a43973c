from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from shipcontrol.telemetry.readings import BatteryReading, TankReading


def _fmt(value: Any, suffix: str = "") -> str:
    if value is None:
        return "[dim]-[/dim]"
    return escape(f"{value}{suffix}")


class RichOutput:
    """Rich-based terminal output helpers for *shipcontrol*."""

    def __init__(self, console: Console) -> None:
        self._con = console

    # ------------------------------------------------------------------
    # Readings
    # ------------------------------------------------------------------

    def tank_reading(self, reading: TankReading) -> None:
        """Print a one-row table for a tank update."""
        table = Table(title=f"Tank {escape(reading.name)}", title_justify="left")
        table.add_column("Level", justify="right")
        table.add_column("Capacity", justify="right")
        table.add_column("Valve")
        table.add_column("Auto switch")
        table.add_column("Module", justify="right")

        valve_style = "green" if reading.valve_state == "OPEN" else "yellow"
        table.add_row(
            _fmt(reading.level, "%"),
            _fmt(reading.capacity, " L"),
            f"[{valve_style}]{_fmt(reading.valve_state)}[/{valve_style}]",
            _fmt(reading.auto_switch_mode),
            _fmt(reading.module_id),
        )
        self._con.print(table)

    def battery_reading(self, reading: BatteryReading) -> None:
        """Print a one-row table for a battery update."""
        table = Table(title=f"Battery {escape(reading.name)}", title_justify="left")
        table.add_column("Voltage", justify="right")
        table.add_column("Current", justify="right")
        table.add_column("State of charge", justify="right")
        table.add_column("Health")
        table.add_column("Module", justify="right")

        soc = (
            f"{reading.state_of_charge * 100:.1f}%"
            if reading.state_of_charge is not None
            else "[dim]unknown[/dim]"
        )
        health_style = "green" if reading.health_level == "GREEN" else "red"
        table.add_row(
            _fmt(reading.voltage, " V"),
            _fmt(reading.current, " A"),
            soc,
            f"[{health_style}]{_fmt(reading.health_level)}[/{health_style}]",
            _fmt(reading.module_id),
        )
        self._con.print(table)

    def delta(self, delta: dict[str, Any]) -> None:
        """Print the path/value pairs of a Signal K delta."""
        for update in delta.get("updates", []):
            for entry in update.get("values", []):
                path = escape(str(entry["path"]))
                value = escape(str(entry["value"]))
                self._con.print(f"[cyan]{path}[/cyan] = {value}", highlight=False)

    # ------------------------------------------------------------------
    # Status helpers
    # ------------------------------------------------------------------

    def error(self, message: str) -> None:
        """Print a bold red error line."""
        self._con.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)

    def info(self, message: str) -> None:
        """Print an informational message (plain)."""
        self._con.print(message)
