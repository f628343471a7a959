#!/usr/bin/env python3
"""
BurnSwap CLI

Command-line interface for fee estimates, configuration and sandbox runs.

Usage:
    burnswap estimate buy <gross_token_out> [--min-output N]
    burnswap estimate sell <token_amount>
    burnswap config show
    burnswap simulate [--buy VALUE] [--sell AMOUNT] [--min-output N]
"""

import json
from typing import Optional

import click

from ..config.loader import BurnSwapConfig, load_config
from ..exceptions import BurnSwapException
from ..logger import configure_logging
from ..swap.events import TradeExecuted
from ..swap.fees import FeeBreakdown, min_gross_for_net, split


def format_address(address: str, short: bool = False) -> str:
    """Format address for display."""
    if short:
        return f"{address[:10]}...{address[-8:]}"
    return address


def _print_breakdown(title: str, breakdown: FeeBreakdown) -> None:
    click.echo(click.style(title, fg="cyan", bold=True))
    click.echo(f"Gross:    {breakdown.gross_amount}")
    click.echo(f"Burn:     {breakdown.burn_amount}")
    click.echo(f"Creator:  {breakdown.creator_amount}")
    click.echo(f"Net:      {breakdown.net_amount}")
    click.echo(f"Total fee: {breakdown.total_fee_amount}")


def _config(ctx: click.Context) -> BurnSwapConfig:
    return ctx.obj["config"]


@click.group()
@click.version_option(version="1.0.0", prog_name="burnswap")
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to burnswap.toml (default: $BURNSWAP_CONFIG or ./burnswap.toml)",
)
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]):
    """BurnSwap Command Line Interface

    Fee estimates and sandbox simulations for the fee-skimming swap engine.
    """
    try:
        config = load_config(config_path)
        if log_level:
            config.logging.level = log_level.upper()
        config.validate()
    except BurnSwapException as e:
        raise click.ClickException(str(e))

    configure_logging(
        log_level=config.logging.level,
        console_output=config.logging.console_output,
        file_output=config.logging.file_output,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ---------------------------------------------------------------------------
# estimate
# ---------------------------------------------------------------------------

@cli.group("estimate")
def estimate():
    """Fee split of a trade, without executing it."""


@estimate.command("buy")
@click.argument("gross_token_out", type=int)
@click.option("--min-output", type=int, default=0, help="Net tokens the buyer wants at least")
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def estimate_buy_cmd(ctx: click.Context, gross_token_out: int, min_output: int, as_json: bool):
    """Split a buy whose exchange output is GROSS_TOKEN_OUT tokens.

    Examples:

        burnswap estimate buy 1000000

        burnswap estimate buy 1000000 --min-output 990000
    """
    rates = _config(ctx).fees.to_rates()
    try:
        breakdown = split(gross_token_out, rates)
        min_gross = min_gross_for_net(min_output, rates)
    except BurnSwapException as e:
        raise click.ClickException(str(e))

    if as_json:
        data = breakdown.to_dict()
        data["minGrossForMinOutput"] = min_gross
        click.echo(json.dumps(data, indent=2))
        return

    _print_breakdown("Buy estimate", breakdown)
    if min_output:
        click.echo(f"Exchange minimum for net ≥ {min_output}: {min_gross}")


@estimate.command("sell")
@click.argument("token_amount", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print JSON")
@click.pass_context
def estimate_sell_cmd(ctx: click.Context, token_amount: int, as_json: bool):
    """Split a sell of TOKEN_AMOUNT tokens; the net part is swapped."""
    try:
        breakdown = split(token_amount, _config(ctx).fees.to_rates())
    except BurnSwapException as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(breakdown.to_dict(), indent=2))
        return
    _print_breakdown("Sell estimate", breakdown)


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

@cli.group("config")
def config_group():
    """Inspect configuration."""


@config_group.command("show")
@click.pass_context
def config_show_cmd(ctx: click.Context):
    """Print the effective configuration (TOML + environment)."""
    click.echo(json.dumps(_config(ctx).to_dict(), indent=2))


# ---------------------------------------------------------------------------
# simulate
# ---------------------------------------------------------------------------

@cli.command("simulate")
@click.option("--buy", "buy_value", type=int, default=10**18, help="Native value to buy with")
@click.option("--sell", "sell_amount", type=int, default=None, help="Tokens to sell (default: all bought)")
@click.option("--min-output", type=int, default=0, help="Minimum output for both trades")
@click.pass_context
def simulate_cmd(ctx: click.Context, buy_value: int, sell_amount: Optional[int], min_output: int):
    """Run a buy and a sell against an in-memory pool.

    Examples:

        burnswap simulate

        burnswap simulate --buy 500000000000000000 --sell 1000
    """
    from ..sandbox import build_sandbox

    config = _config(ctx)
    try:
        sandbox = build_sandbox(config, log_events=config.logging.log_events)
        swap = sandbox.swap

        click.echo(click.style("BurnSwap sandbox", fg="cyan", bold=True))
        click.echo(f"Engine:  {swap.address}")
        click.echo(f"Pool:    {sandbox.pool.address}")
        click.echo(f"Trader:  {format_address(sandbox.trader, short=True)}")
        click.echo()

        tokens_out = swap.buy_native_for_token(sandbox.trader, buy_value, min_output)
        click.echo(f"Bought {tokens_out} {sandbox.token.symbol} for {buy_value} native")

        amount = tokens_out if sell_amount is None else sell_amount
        sandbox.approve_sell(sandbox.trader, amount)
        native_out = swap.sell_token_for_native(sandbox.trader, amount, min_output)
        click.echo(f"Sold {amount} {sandbox.token.symbol} for {native_out} native")
    except BurnSwapException as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")

    click.echo()
    click.echo(click.style("Trades", fg="green", bold=True))
    for event in swap.events(TradeExecuted):
        click.echo(json.dumps(event.to_record().to_dict()))
    click.echo(f"Burn sink balance:   {sandbox.token.balance_of(swap.config.burn_sink)}")
    click.echo(f"Creator balance:     {sandbox.token.balance_of(swap.creator_wallet)}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
