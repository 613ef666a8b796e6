from __future__ import annotations

import json

import typer
from dotenv import load_dotenv

app = typer.Typer(help="Portfolio Compare CLI")


def _parse_or_exit(query: str):
    from src.core.query import parse_compare_query

    result = parse_compare_query(query)
    if not result.ok:
        typer.echo(f"Invalid query: {result.error}", err=True)
        raise typer.Exit(code=2)
    return result.value


@app.command("validate")
def validate_cmd(
    query: str = typer.Argument(..., help='URL query string, e.g. "equity=AAPL,MSFT&benchmark=gold"'),
):
    """Parse a compare query and print the equal-weight portfolios it describes."""
    parsed = _parse_or_exit(query)
    typer.echo(json.dumps(parsed.as_dict(), indent=2))


@app.command("compare")
def compare_cmd(
    query: str = typer.Argument(..., help='URL query string, e.g. "equity=AAPL,MSFT&benchmark=gold&range=1y"'),
):
    """Fetch prices for a compare query and print the summary table."""
    load_dotenv()
    from market_data.config import load_config
    from market_data.exceptions import MarketDataError
    from market_data.provider import build_provider
    from src.core.compare_service import build_compare_report
    from src.utils.money import format_pct, format_usd

    parsed = _parse_or_exit(query)
    if not parsed.portfolios:
        typer.echo("Invalid query: equity param is required", err=True)
        raise typer.Exit(code=2)

    cfg, _path = load_config()
    try:
        report = build_compare_report(parsed, provider=build_provider(cfg.market_data))
    except MarketDataError as e:
        typer.echo(f"Market data error: {e}", err=True)
        raise typer.Exit(code=1)

    summary = report.summary
    typer.echo(f"{'TICKER':<10} {'START':>14} {'END':>14} {'RETURN':>9} {'VALUE':>14}")
    for r in summary.rows:
        typer.echo(
            f"{r.ticker:<10} {format_usd(r.start_price):>14} {format_usd(r.end_price):>14} "
            f"{format_pct(r.return_pct):>9} {format_usd(r.end_value):>14}"
        )
    if summary.total is not None:
        typer.echo(
            f"{'TOTAL':<10} {'':>14} {'':>14} {format_pct(summary.total.return_pct):>9} {format_usd(summary.total.end_value):>14}"
        )


if __name__ == "__main__":
    app()
