"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from pathlib import Path

import typer

from goproctl.core.config import load_settings
from goproctl.core.errors import GoproctlError
from goproctl.core.service import CameraService, record_as_dict

app = typer.Typer(help="Read GoPro camera information over Bluetooth Low Energy")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to a YAML config file"),
    name: list[str] | None = typer.Option(None, "--name", help="Advertised name fragment (repeatable)"),
    address: list[str] | None = typer.Option(None, "--address", help="Allowed device address (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {
        "config": config,
        "name": tuple(name or ()),
        "address": tuple(a.upper() for a in address or ()),
    }


def _build_service(ctx: typer.Context) -> CameraService:
    options = ctx.obj or {}
    settings = load_settings(options.get("config"))
    match = settings.match
    if options.get("name"):
        match = dataclasses.replace(match, name_contains=options["name"])
    if options.get("address"):
        match = dataclasses.replace(match, address=options["address"])
    return CameraService(dataclasses.replace(settings, match=match))


def _echo_record(record: object) -> None:
    for key, value in record_as_dict(record).items():
        typer.echo(f"{key}: {value}")


@app.command("wifi")
def wifi(ctx: typer.Context) -> None:
    """Show the camera's Wi-Fi access point credentials."""
    try:
        service = _build_service(ctx)
        _echo_record(asyncio.run(service.fetch_wifi_info()))
    except GoproctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("factory")
def factory(ctx: typer.Context) -> None:
    """Show revisions, serial, model, and manufacturer."""
    try:
        service = _build_service(ctx)
        _echo_record(asyncio.run(service.fetch_factory_info()))
    except GoproctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show battery level and transmit power."""
    try:
        service = _build_service(ctx)
        _echo_record(asyncio.run(service.fetch_status_info()))
    except GoproctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("info")
def info(ctx: typer.Context) -> None:
    """Show every known field in a single session."""
    try:
        service = _build_service(ctx)
        _echo_record(asyncio.run(service.fetch_camera_info()))
    except GoproctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices(ctx: typer.Context) -> None:
    """Scan and list nearby BLE peripherals, marking the ones that match."""
    try:
        service = _build_service(ctx)
        devices = asyncio.run(service.list_devices())
        if not devices:
            typer.echo("No Bluetooth devices found")
            return

        for device in devices:
            matched = "match" if service.matches(device) else "-"
            typer.echo(f"{device.address} {device.name or '<no-name>'} {matched}")
    except GoproctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
