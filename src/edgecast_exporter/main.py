"""
edgecast-exporter entry point.

Usage:
    edgecast-exporter                        Serve /metrics on port 80
    edgecast-exporter serve --port 9101      Same, on another port
    edgecast-exporter check                  One scrape, printed as a table

Credentials come from EDGECAST_ACCOUNT_ID / EDGECAST_TOKEN (or the
matching options).
"""

from __future__ import annotations

import logging
import time

import click
from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

from edgecast_exporter import __version__
from edgecast_exporter.client import ServiceMetrics, build_service
from edgecast_exporter.collector import EdgecastCollector
from edgecast_exporter.config import (
    DEFAULT_API_URL,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_PORT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    build_config,
)
from edgecast_exporter.errors import ConfigurationError
from edgecast_exporter.platforms import PlatformRegistry


log = logging.getLogger("edgecast_exporter")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="edgecast-exporter")
@click.option("--account-id", envvar="EDGECAST_ACCOUNT_ID", default=None,
              help="Edgecast customer account ID")
@click.option("--token", envvar="EDGECAST_TOKEN", default=None,
              help="Edgecast REST API token")
@click.option("--platforms", envvar="EDGECAST_PLATFORMS", default=None,
              help="Comma separated platform IDs to monitor (default: all)")
@click.option("--retries", envvar="EDGECAST_RETRIES", default=DEFAULT_RETRIES, type=int,
              help="Attempts per API request before giving up")
@click.option("--timeout", envvar="EDGECAST_TIMEOUT", default=DEFAULT_TIMEOUT_SECONDS, type=float,
              help="Per-attempt API request timeout in seconds")
@click.option("--api-url", envvar="EDGECAST_API_URL", default=DEFAULT_API_URL,
              help="Edgecast API base URL")
@click.option("--max-workers", envvar="EDGECAST_MAX_WORKERS", default=None, type=int,
              help="Max platforms fetched in parallel per scrape (default: all)")
@click.option("--listen-address", envvar="EDGECAST_LISTEN_ADDRESS",
              default=DEFAULT_LISTEN_ADDRESS, help="Address to bind the HTTP server to")
@click.option("--port", envvar="EDGECAST_PORT", default=DEFAULT_PORT, type=int,
              help="Port to serve /metrics on")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx, account_id: str, token: str, platforms: str, retries: int, timeout: float,
        api_url: str, max_workers: int, listen_address: str, port: int, verbose: bool):
    """Edgecast realtime stats exporter for Prometheus."""
    quiet = ctx.invoked_subcommand == "check"
    logging.basicConfig(
        level=logging.DEBUG if verbose else (logging.WARNING if quiet else logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    platform_registry = PlatformRegistry()
    try:
        config = build_config(
            account_id=account_id,
            token=token,
            platforms=platforms,
            registry=platform_registry,
            api_url=api_url,
            retries=retries,
            timeout_seconds=timeout,
            max_workers=max_workers,
        )
    except ConfigurationError as exc:
        click.echo(f"error: {exc}", err=True)
        raise SystemExit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["platforms"] = platform_registry
    ctx.obj["listen_address"] = listen_address
    ctx.obj["port"] = port

    # If no subcommand, serve
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
@click.pass_context
def serve(ctx):
    """Serve Prometheus metrics over HTTP until interrupted."""
    config = ctx.obj["config"]
    platform_registry = ctx.obj["platforms"]
    listen_address = ctx.obj["listen_address"]
    port = ctx.obj["port"]

    metrics = ServiceMetrics(registry=REGISTRY)
    service, client = build_service(config, metrics, registry=platform_registry)
    collector = EdgecastCollector(
        service,
        config.platforms,
        registry=platform_registry,
        metrics=metrics,
        max_workers=config.max_workers,
    )
    REGISTRY.register(collector)

    log.info(
        "monitoring platforms %s",
        ", ".join(f"{p.id}({p.name})" for p in config.platforms),
    )
    start_http_server(port, addr=listen_address, registry=REGISTRY)
    log.info("msg=HTTP addr=%s:%d", listen_address, port)

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        client.close()


@cli.command()
@click.pass_context
def check(ctx):
    """Run a single scrape against the API and print what it produced."""
    from rich.console import Console
    from rich.table import Table

    config = ctx.obj["config"]
    platform_registry = ctx.obj["platforms"]

    # Private registry so the service metrics don't leak into the global one
    metrics = ServiceMetrics(registry=CollectorRegistry())
    service, client = build_service(config, metrics, registry=platform_registry)
    collector = EdgecastCollector(
        service,
        config.platforms,
        registry=platform_registry,
        metrics=metrics,
        max_workers=config.max_workers,
    )

    try:
        started = time.perf_counter()
        samples = collector.samples()
        took = time.perf_counter() - started
    finally:
        client.close()

    console = Console()

    if not samples:
        console.print("\n[bold red]No samples collected.[/bold red] "
                      "[dim]Re-run with --verbose to see why.[/dim]\n")
        raise SystemExit(1)

    table = Table(title="Edgecast_metrics_*", show_header=True, header_style="bold")
    table.add_column("Metric", no_wrap=True)
    table.add_column("Labels")
    table.add_column("Value", justify="right")

    for sample in samples:
        labels = " ".join(
            f"{name}=[cyan]{value}[/cyan]"
            for name, value in zip(sample.descriptor.labels, sample.label_values)
        )
        short_name = sample.descriptor.name.split("_", 2)[-1]
        table.add_row(short_name, labels, f"{sample.value:,.2f}")

    console.print(table)

    expected = 4 * len(config.platforms)
    dropped = sum(
        s.value
        for family in metrics.dropped_series.collect()
        for s in family.samples
        if s.name.endswith("_total")
    )
    color = "green" if not dropped else "yellow"
    console.print(
        f"[{color}]{len(samples)} samples from {expected - int(dropped)}/{expected} "
        f"fetches in {took:.2f}s[/{color}]\n"
    )


if __name__ == "__main__":
    cli()
