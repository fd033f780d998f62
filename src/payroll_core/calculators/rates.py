"""Versioned tax rate sets.

A rate set is an immutable configuration object injected into the
TaxCalculator. It carries its own validity window; callers check
``is_valid_for`` (or ``ensure_valid_for``) before using it for a pay date.

Rate sets can be loaded from a JSON payload with structure:
{
    "version": "2024",
    "valid_from": "2024-01-01",
    "valid_until": "2025-01-15",       // exclusive, optional
    "allowance_value": 4300,
    "federal_brackets": {
        "single": [
            {"min": 0, "max": 11000, "rate": 0.10},
            {"min": 11000, "max": 44725, "rate": 0.12},
            ...
            {"min": 578125, "max": null, "rate": 0.37}
        ],
        "married": [...],
        "head": [...]
    },
    "no_income_tax_states": ["AK", "FL", ...],
    "state_rates": {"CA": 0.08, ...},
    "fica": {
        "social_security_rate": 0.062,
        "social_security_wage_base": 160200,
        "medicare_rate": 0.0145,
        "additional_medicare_rate": 0.009,
        "additional_medicare_threshold": 200000
    }
}
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any

from payroll_core.calculators.types import ZERO, FilingStatus, TaxBracket
from payroll_core.errors import InvalidInput, RateSetNotValid


def build_brackets(
    rows: Iterable[tuple[Decimal | int | str, Decimal | int | str | None, Decimal | str]],
) -> tuple[TaxBracket, ...]:
    """Build a bracket table, precomputing the cumulative tax at each bracket start.

    Rows are ``(min, max, rate)`` with ``max=None`` for the top bracket.
    """
    brackets: list[TaxBracket] = []
    base = ZERO
    for low, high, rate in sorted(rows, key=lambda r: Decimal(str(r[0]))):
        low_d = Decimal(str(low))
        high_d = Decimal(str(high)) if high is not None else None
        rate_d = Decimal(str(rate))
        if brackets:
            prev = brackets[-1]
            if prev.max_amount is None or prev.max_amount != low_d:
                raise InvalidInput(
                    f"Bracket starting at {low_d} does not continue the previous bracket",
                    field="brackets",
                )
            base = prev.flat_amount + (prev.max_amount - prev.min_amount) * prev.rate
        brackets.append(
            TaxBracket(min_amount=low_d, max_amount=high_d, rate=rate_d, flat_amount=base)
        )
    if not brackets or brackets[-1].max_amount is not None:
        raise InvalidInput("Top bracket must be unbounded", field="brackets")
    return tuple(brackets)


@dataclass(frozen=True)
class TaxRateSet:
    """Immutable set of tax rates with a validity window."""

    version: str
    valid_from: date
    valid_until: date | None  # Exclusive; None = open ended
    federal_brackets: Mapping[FilingStatus, tuple[TaxBracket, ...]]
    state_rates: Mapping[str, Decimal]
    no_income_tax_states: frozenset[str] = frozenset()
    allowance_value: Decimal = Decimal("4300")
    social_security_rate: Decimal = Decimal("0.062")
    social_security_wage_base: Decimal = Decimal("160200")
    medicare_rate: Decimal = Decimal("0.0145")
    additional_medicare_rate: Decimal = Decimal("0.009")
    additional_medicare_threshold: Decimal = Decimal("200000")

    def is_valid_for(self, as_of: date) -> bool:
        """Check whether this rate set applies on a date."""
        if as_of < self.valid_from:
            return False
        return self.valid_until is None or as_of < self.valid_until

    def ensure_valid_for(self, as_of: date) -> None:
        """Raise RateSetNotValid if this rate set does not apply on a date."""
        if not self.is_valid_for(as_of):
            raise RateSetNotValid(self.version, as_of)

    def brackets_for(self, filing_status: FilingStatus) -> tuple[TaxBracket, ...]:
        return self.federal_brackets[filing_status]

    def state_rate(self, state_code: str) -> Decimal | None:
        """Flat rate for a state; zero for no-income-tax states, None if unknown."""
        if state_code in self.no_income_tax_states:
            return ZERO
        return self.state_rates.get(state_code)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> TaxRateSet:
        """Parse a rate set from its JSON payload."""
        try:
            brackets = {
                FilingStatus(status): build_brackets(
                    (b["min"], b.get("max"), b["rate"]) for b in rows
                )
                for status, rows in payload["federal_brackets"].items()
            }
            fica = payload.get("fica", {})
            return cls(
                version=str(payload["version"]),
                valid_from=date.fromisoformat(payload["valid_from"]),
                valid_until=(
                    date.fromisoformat(payload["valid_until"])
                    if payload.get("valid_until")
                    else None
                ),
                federal_brackets=MappingProxyType(brackets),
                state_rates=MappingProxyType(
                    {
                        code.upper(): Decimal(str(rate))
                        for code, rate in payload.get("state_rates", {}).items()
                    }
                ),
                no_income_tax_states=frozenset(
                    code.upper() for code in payload.get("no_income_tax_states", [])
                ),
                allowance_value=Decimal(str(payload.get("allowance_value", "4300"))),
                social_security_rate=Decimal(
                    str(fica.get("social_security_rate", "0.062"))
                ),
                social_security_wage_base=Decimal(
                    str(fica.get("social_security_wage_base", "160200"))
                ),
                medicare_rate=Decimal(str(fica.get("medicare_rate", "0.0145"))),
                additional_medicare_rate=Decimal(
                    str(fica.get("additional_medicare_rate", "0.009"))
                ),
                additional_medicare_threshold=Decimal(
                    str(fica.get("additional_medicare_threshold", "200000"))
                ),
            )
        except (KeyError, ValueError, ArithmeticError) as exc:
            raise InvalidInput(f"Malformed tax rate payload: {exc}", field="rate_set") from exc


def load_rate_set(path: str | Path) -> TaxRateSet:
    """Load a rate set from a JSON file."""
    with open(path, encoding="utf-8") as fh:
        return TaxRateSet.from_dict(json.load(fh))


RATES_2024 = TaxRateSet(
    version="2024",
    valid_from=date(2024, 1, 1),
    valid_until=date(2025, 1, 15),
    federal_brackets=MappingProxyType(
        {
            FilingStatus.SINGLE: build_brackets(
                [
                    (0, 11000, "0.10"),
                    (11000, 44725, "0.12"),
                    (44725, 95375, "0.22"),
                    (95375, 182100, "0.24"),
                    (182100, 231250, "0.32"),
                    (231250, 578125, "0.35"),
                    (578125, None, "0.37"),
                ]
            ),
            FilingStatus.MARRIED: build_brackets(
                [
                    (0, 22000, "0.10"),
                    (22000, 89450, "0.12"),
                    (89450, 190750, "0.22"),
                    (190750, 364200, "0.24"),
                    (364200, 462500, "0.32"),
                    (462500, 693750, "0.35"),
                    (693750, None, "0.37"),
                ]
            ),
            FilingStatus.HEAD: build_brackets(
                [
                    (0, 15700, "0.10"),
                    (15700, 59850, "0.12"),
                    (59850, 95350, "0.22"),
                    (95350, 182100, "0.24"),
                    (182100, 231250, "0.32"),
                    (231250, 578100, "0.35"),
                    (578100, None, "0.37"),
                ]
            ),
        }
    ),
    no_income_tax_states=frozenset({"AK", "FL", "NV", "SD", "TN", "TX", "WA", "WY"}),
    state_rates=MappingProxyType(
        {
            code: Decimal(rate)
            for code, rate in {
                # Flat tax states
                "CO": "0.0455",
                "IL": "0.0495",
                "IN": "0.0323",
                "KY": "0.045",
                "MA": "0.05",
                "MI": "0.0425",
                "NH": "0.05",
                "NC": "0.0475",
                "PA": "0.0307",
                "UT": "0.0485",
                # Progressive states, one representative rate each
                "AL": "0.05",
                "AZ": "0.0454",
                "AR": "0.055",
                "CA": "0.08",
                "CT": "0.06",
                "DE": "0.066",
                "GA": "0.0575",
                "HI": "0.07",
                "ID": "0.06",
                "IA": "0.06",
                "KS": "0.057",
                "LA": "0.0425",
                "ME": "0.0715",
                "MD": "0.05",
                "MN": "0.0785",
                "MS": "0.05",
                "MO": "0.054",
                "MT": "0.0675",
                "NE": "0.0684",
                "NJ": "0.06375",
                "NM": "0.059",
                "NY": "0.065",
                "ND": "0.0290",
                "OH": "0.0399",
                "OK": "0.0475",
                "OR": "0.0875",
                "RI": "0.0599",
                "SC": "0.07",
                "VT": "0.066",
                "VA": "0.0575",
                "WV": "0.065",
                "WI": "0.0654",
                "DC": "0.0895",
            }.items()
        }
    ),
)
