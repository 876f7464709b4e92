"""CLI entry point for the emp_monitor daemon."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from emp_monitor.config import load_config
from emp_monitor.daemon import MonitorDaemon, run_daemon


def _require_contract(cfg):
    """Exit with error if no contract address is configured."""
    if not cfg.emp_address:
        click.echo("Error: No contract address configured.", err=True)
        click.echo("Set EMP_MONITOR_EMP_ADDRESS or emp_address in config.", err=True)
        sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """emp_monitor - alerts for ExpiringMultiParty contract events."""
    ctx.ensure_object(dict)
    cfg = load_config(config_path)
    ctx.obj["config"] = cfg

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the monitor loop."""
    cfg = ctx.obj["config"]
    _require_contract(cfg)

    click.echo(f"Starting emp_monitor for {cfg.emp_address} (every {cfg.poll_interval}s)")
    asyncio.run(run_daemon(cfg))


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Run every check once and exit."""
    cfg = ctx.obj["config"]
    _require_contract(cfg)

    emitted = asyncio.run(MonitorDaemon(cfg).run_once())
    click.echo(f"{emitted} alert(s) emitted")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show monitor configuration."""
    cfg = ctx.obj["config"]
    pf = cfg.price_feed
    click.echo(f"Contract:     {cfg.emp_address or '(not set)'}")
    click.echo(f"RPC URL:      {cfg.rpc_url}")
    click.echo(f"Network ID:   {cfg.network_id}")
    click.echo(f"Start block:  {cfg.start_block}")
    click.echo(f"Symbols:      {cfg.synthetic_symbol} / {cfg.collateral_symbol}")
    click.echo(f"Identifier:   {cfg.price_identifier or '(not set)'}")
    click.echo(f"Price feed:   {pf.exchange} {pf.pair}{' (inverted)' if pf.invert_price else ''}")
    click.echo(f"Poll every:   {cfg.poll_interval}s")
    click.echo(f"Watermarks:   {cfg.watermark_policy}")
    click.echo(f"Liquidators:  {', '.join(cfg.monitored_liquidators) or '(none)'}")
    click.echo(f"Disputers:    {', '.join(cfg.monitored_disputers) or '(none)'}")
    click.echo(f"API key:      {'***configured***' if pf.api_key else '(not set)'}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
