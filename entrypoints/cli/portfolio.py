from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from pydantic import ValidationError

from rentfolio.analysis.frames import metrics_frame
from rentfolio.domain.portfolio import equal_stakes
from rentfolio.domain.property import Property
from rentfolio.services.portfolio import build_portfolio, summarize

app = typer.Typer(help="rentfolio: per-property metrics and portfolio roll-ups.")


def _read_payload(path: Path) -> tuple[list[dict[str, Any]], Optional[float]]:
    """
    Accept either a bare list of property payloads or
    {"market_cap_rate": 6.0, "properties": [...]} (the saved-portfolio shape).
    """
    raw = json.loads(path.read_text())
    if isinstance(raw, list):
        return raw, None
    if isinstance(raw, dict):
        rate = raw.get("market_cap_rate", raw.get("marketCapRate"))
        return list(raw.get("properties") or []), (float(rate) if rate is not None else None)
    raise typer.BadParameter(f"{path} must hold a JSON list or object")


def _load_properties(path: Path) -> tuple[list[Property], Optional[float]]:
    payloads, rate = _read_payload(path)
    props: list[Property] = []
    for i, payload in enumerate(payloads):
        # saved portfolios wrap each property as {"property": {...}, "metrics": {...}}
        if isinstance(payload, dict) and "property" in payload:
            payload = payload["property"]
        try:
            props.append(Property.model_validate(payload))
        except ValidationError as err:
            logger.error("Invalid property payload", index=i, errors=err.error_count())
            raise typer.Exit(code=1) from err
    logger.info("Loaded properties", path=str(path), count=len(props))
    return props, rate


@app.command()
def metrics(
    path: Path = typer.Argument(..., exists=True, readable=True, help="JSON file of properties"),
) -> None:
    """
    Print FinancialMetrics for every property in PATH as JSON.
    """
    props, rate = _load_properties(path)
    portfolio = build_portfolio(props, rate)
    out = [{"id": e.id, "name": e.property.shared.name, **asdict(e.metrics)} for e in portfolio.entries]
    typer.echo(json.dumps(out, indent=2))


@app.command()
def summary(
    path: Path = typer.Argument(..., exists=True, readable=True, help="JSON file of properties"),
    market_cap_rate: Optional[float] = typer.Option(
        None, help="Market cap rate in % (default: file value, then RENTFOLIO_DEFAULT_MARKET_CAP_RATE)"
    ),
    investors: Optional[int] = typer.Option(
        None, min=0, help="Split totals across this many equal-stake investors (0: no split)"
    ),
) -> None:
    """
    Print the per-property table followed by the portfolio summary.
    """
    props, file_rate = _load_properties(path)
    portfolio = build_portfolio(props, market_cap_rate if market_cap_rate is not None else file_rate)
    report = summarize(portfolio, equal_stakes(investors) if investors is not None else None)

    cols = ["name", "variant", "net_monthly_cash_flow", "cash_on_cash_return", "cap_rate"]
    typer.echo(metrics_frame(portfolio.entries)[cols].to_string(index=False))
    typer.echo("")
    typer.echo(json.dumps(asdict(report.summary), indent=2))
    for share in report.investor_shares:
        typer.echo(f"{share.name} ({share.stake:.0%}): {json.dumps(share.amounts)}")

    logger.info(
        "Portfolio summarized",
        properties=report.summary.property_count,
        estimated_value=report.summary.estimated_value,
    )


if __name__ == "__main__":
    app()
