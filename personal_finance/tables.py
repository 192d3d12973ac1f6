"""Rate and threshold tables.

Bracket schedules, payroll limits, insurance premiums and lender policy
change every year, so they live in ``data/rate_tables.json`` rather than in
the engines.  The helpers here read that file and build the typed inputs the
calculators expect.  Every accessor takes an optional ``tables`` mapping
matching the JSON schema, so callers can substitute their own figures.

Example
-------

>>> table = bracket_table(2024, "ON")
>>> table.lowest_rate
0.0505

>>> premium_schedule().rate_for(0.10)
0.031
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from personal_finance.calculators.affordability import AffordabilityPolicy
from personal_finance.calculators.insurance import PremiumSchedule
from personal_finance.calculators.refinance import RefinancePolicy
from personal_finance.calculators.taxes import BracketTable, LandTransferRebate, PayrollTable
from personal_finance.exceptions import RateTableError

_DEFAULT_TABLE_PATH = Path(__file__).resolve().parent / "data" / "rate_tables.json"

FEDERAL = "federal"


def load_rate_tables(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load rate tables from JSON.  If ``path`` is not provided, load the
    default file shipped with the package.

    Parameters
    ----------
    path : Path, optional
        Path to a JSON file containing the rate tables.

    Returns
    -------
    dict
        The parsed rate tables.
    """
    p = path or _DEFAULT_TABLE_PATH
    with open(p, "r", encoding="utf-8") as f:
        tables = json.load(f)
    return tables


def _lookup(tables: Dict[str, Any], *keys: str) -> Any:
    node: Any = tables
    for depth, key in enumerate(keys):
        if not isinstance(node, dict) or key not in node:
            raise RateTableError(f"rate tables have no entry {'/'.join(keys[:depth + 1])!r}")
        node = node[key]
    return node


def bracket_table(year: int, jurisdiction: str, tables: Optional[Dict[str, Any]] = None) -> BracketTable:
    """Income tax brackets for ``jurisdiction`` ("federal" or a province code)."""
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "income_tax", str(year), jurisdiction)
    return BracketTable.from_rows(_lookup(entry, "brackets"), jurisdiction=jurisdiction, year=int(year))


def basic_personal_amount(year: int, jurisdiction: str, tables: Optional[Dict[str, Any]] = None) -> float:
    if tables is None:
        tables = load_rate_tables()
    return float(_lookup(tables, "income_tax", str(year), jurisdiction, "basic_personal_amount"))


def payroll_table(year: int, tables: Optional[Dict[str, Any]] = None) -> PayrollTable:
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "payroll", str(year))
    cpp = _lookup(entry, "cpp")
    ei = _lookup(entry, "ei")
    try:
        return PayrollTable(
            cpp_exemption=float(cpp["exemption"]),
            cpp_max_earnings=float(cpp["max_earnings"]),
            cpp_rate=float(cpp["rate"]),
            ei_max_insurable=float(ei["max_insurable"]),
            ei_rate=float(ei["rate"]),
        )
    except KeyError as exc:
        raise RateTableError(f"payroll table for {year} is missing {exc.args[0]!r}") from exc


def premium_schedule(tables: Optional[Dict[str, Any]] = None) -> PremiumSchedule:
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "mortgage_insurance")
    return PremiumSchedule.from_rows(_lookup(entry, "tiers"), exempt_from=float(entry.get("exempt_from", 0.20)))


def affordability_policy(tables: Optional[Dict[str, Any]] = None) -> AffordabilityPolicy:
    """Debt-service ratio limits and stress-test parameters."""
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "affordability")
    return AffordabilityPolicy(
        max_front_ratio=float(_lookup(entry, "max_front_ratio")),
        max_back_ratio=float(_lookup(entry, "max_back_ratio")),
        stress_buffer=float(_lookup(entry, "stress_buffer")),
        stress_floor_rate=float(_lookup(entry, "stress_floor_rate")),
    )


def default_monthly_heating(tables: Optional[Dict[str, Any]] = None) -> float:
    if tables is None:
        tables = load_rate_tables()
    return float(_lookup(tables, "affordability").get("default_monthly_heating", 0.0))


def refinance_policy(tables: Optional[Dict[str, Any]] = None) -> RefinancePolicy:
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "refinance")
    return RefinancePolicy(
        posted_rate_premium=float(_lookup(entry, "posted_rate_premium")),
        interest_months=int(entry.get("interest_months", 3)),
        discharge_fee=float(entry.get("discharge_fee", 0.0)),
        appraisal_fee=float(entry.get("appraisal_fee", 0.0)),
        legal_fee=float(entry.get("legal_fee", 0.0)),
    )


def land_transfer_table(
    jurisdiction: str,
    tables: Optional[Dict[str, Any]] = None,
) -> Tuple[BracketTable, Optional[LandTransferRebate]]:
    """Land transfer brackets and first-time buyer rebate for ``jurisdiction``.

    The rebate is ``None`` when the jurisdiction offers none.
    """
    if tables is None:
        tables = load_rate_tables()
    entry = _lookup(tables, "land_transfer", jurisdiction)
    table = BracketTable.from_rows(_lookup(entry, "brackets"), jurisdiction=jurisdiction)
    rebate = entry.get("rebate")
    if rebate is None:
        return table, None
    return table, LandTransferRebate(amount=float(rebate["amount"]), max_price=float(rebate["max_price"]))


__all__ = [
    "FEDERAL",
    "load_rate_tables",
    "bracket_table",
    "basic_personal_amount",
    "payroll_table",
    "premium_schedule",
    "affordability_policy",
    "default_monthly_heating",
    "refinance_policy",
    "land_transfer_table",
]
