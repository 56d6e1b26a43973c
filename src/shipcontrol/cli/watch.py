"""``shipcontrol watch``: stream readings from an appliance to the terminal."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import click

from shipcontrol.models.config import AppSettings, BridgeConfig
from shipcontrol.signalk.bridge import SignalKBridge
from shipcontrol.telemetry.client import ShipControlClient

if TYPE_CHECKING:
    from shipcontrol.cli.main import AppContext
    from shipcontrol.exceptions import TransportError
    from shipcontrol.output.formatter import OutputFormatter
    from shipcontrol.telemetry.readings import BatteryReading, TankReading

logger = logging.getLogger(__name__)


@click.command("watch")
@click.option("--host", default=None, help="Appliance address [env: SHIPCONTROL_HOST]")
@click.option(
    "--port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Appliance WebSocket port [env: SHIPCONTROL_PORT]",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Bridge mapping file (default: ~/.config/shipcontrol/bridge.json)",
)
@click.option("--signalk", is_flag=True, default=False, help="Print Signal K deltas")
@click.option(
    "--duration",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Stop after this many seconds (default: run until Ctrl-C)",
)
@click.pass_obj
def watch_cmd(
    app_ctx: AppContext,
    host: str | None,
    port: int | None,
    config_path: str | None,
    signalk: bool,
    duration: float | None,
) -> None:
    """Connect to an appliance and print tank and battery updates.

    With --signalk, readings are routed through the configured mappings and
    the resulting Signal K deltas are printed instead.
    """
    settings = AppSettings()
    host = host or settings.host
    port = port or settings.port
    if not host or not port:
        raise click.UsageError(
            "Appliance address required: pass --host/--port or set "
            "SHIPCONTROL_HOST/SHIPCONTROL_PORT."
        )

    config = BridgeConfig.load(config_path or settings.config_file) if signalk else None

    client = ShipControlClient(
        host,
        port,
        heartbeat_interval=settings.heartbeat_interval,
        request_interval=settings.request_interval,
        reconnect_delay=settings.reconnect_delay,
    )
    asyncio.run(_watch(client, app_ctx.formatter, config, duration))


async def _watch(
    client: ShipControlClient,
    formatter: OutputFormatter,
    config: BridgeConfig | None,
    duration: float | None,
) -> None:
    def on_tank(reading: TankReading) -> None:
        if formatter.format == "json":
            formatter.output(reading, command="watch.tank")
        else:
            formatter.rich.tank_reading(reading)

    def on_battery(reading: BatteryReading) -> None:
        if formatter.format == "json":
            formatter.output(reading, command="watch.battery")
        else:
            formatter.rich.battery_reading(reading)

    def on_delta(delta: dict[str, Any]) -> None:
        if formatter.format == "json":
            formatter.output(delta, command="watch.delta")
        else:
            formatter.rich.delta(delta)

    def on_error(error: TransportError) -> None:
        formatter.output_error(code="transport_error", message=str(error), command="watch")

    if config is not None:
        SignalKBridge(client, config, on_delta=on_delta).attach()
    else:
        client.subscribe_tank_updates(on_tank)
        client.subscribe_battery_updates(on_battery)
    client.subscribe_transport_errors(on_error)

    if formatter.format == "rich":
        formatter.rich.info(f"[dim]Watching {client.url} (Ctrl-C to stop)...[/dim]")

    async with client:
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    logger.debug("Watch finished after %d frame(s)", client.frames_received)
