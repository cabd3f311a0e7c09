# src/rentfolio/analysis/frames.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, fields

import pandas as pd

from rentfolio.domain.metrics import FinancialMetrics
from rentfolio.domain.portfolio import PropertyAnalysis

INPUT_COLUMNS: list[str] = [
    "id",
    "name",
    "variant",
    "purchase_price",
    "loan_amount",
    "loan_remaining",
    "interest_rate",
    "loan_term_years",
    "closing_costs",
]

METRIC_COLUMNS: list[str] = [f.name for f in fields(FinancialMetrics)]


def metrics_frame(entries: Sequence[PropertyAnalysis]) -> pd.DataFrame:
    """
    One row per property: identifying/financing inputs followed by every
    FinancialMetrics field.

    This is the shape the export and dashboard layers read by column name.
    Column order is fixed, including for an empty portfolio.
    """
    rows = []
    for e in entries:
        shared = e.property.shared
        row = {
            "id": shared.id,
            "name": shared.name,
            "variant": e.variant.value,
            "purchase_price": shared.purchase_price,
            "loan_amount": shared.loan_amount,
            "loan_remaining": shared.loan_remaining,
            "interest_rate": shared.interest_rate,
            "loan_term_years": shared.loan_term_years,
            "closing_costs": shared.closing_costs,
        }
        row.update(asdict(e.metrics))
        rows.append(row)

    return pd.DataFrame(rows, columns=INPUT_COLUMNS + METRIC_COLUMNS)
