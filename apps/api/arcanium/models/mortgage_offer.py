"""Mortgage offer record."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class MortgageOffer:
    """A lender's standing offer shown on the mortgage offers page."""

    id: str
    provider: str
    max_amount: int
    term: int  # Years
    interest_rate: float  # Percent, e.g. 3.5
    total_collateral: int  # Percent of the loan
    initial_collateral: int  # Percent paid up front
    wallet_address: str
