"""
Underwriting Ratios

Single-period deal and property metrics: basis, cap rate, yield on cost,
DSCR, LTV, LTC, cash-on-cash and price per unit.

Every function accepts raw field values (numbers or numeric strings),
normalizes them, and returns 0 when the denominator is zero or negative.
Numerators are passed through as-is, so negative NOI yields a negative
ratio. Percent metrics are returned in percent units (8.0 means 8%).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from app.calculations.numeric import round_to, safe_divide, to_number


def total_basis(purchase_price: Any, closing_costs: Any, rehab_budget: Any) -> float:
    """Total project cost: price + closing costs + rehab."""
    return to_number(purchase_price) + to_number(closing_costs) + to_number(rehab_budget)


def cap_rate(noi: Any, price: Any) -> float:
    """Cap rate = NOI / price * 100, to 2 decimals."""
    return round_to(safe_divide(noi, price) * 100, 2)


def yield_on_cost(projected_noi: Any, basis: Any) -> float:
    """
    Yield on cost = projected NOI / total basis * 100, to 2 decimals.

    The spread of yield on cost over the market cap rate is what a
    value-add business plan is buying.
    """
    return round_to(safe_divide(projected_noi, basis) * 100, 2)


def dscr(noi: Any, annual_debt_service: Any) -> float:
    """Debt service coverage = NOI / annual debt service, to 2 decimals."""
    return round_to(safe_divide(noi, annual_debt_service), 2)


def ltv(loan_amount: Any, valuation: Any) -> float:
    """Loan to value = loan / valuation * 100, to 1 decimal."""
    return round_to(safe_divide(loan_amount, valuation) * 100, 1)


def ltc(loan_amount: Any, total_cost: Any) -> float:
    """Loan to cost = loan / total project cost * 100, to 2 decimals."""
    return round_to(safe_divide(loan_amount, total_cost) * 100, 2)


def cash_on_cash(cash_flow: Any, equity: Any) -> float:
    """Cash-on-cash = annual pre-tax cash flow / equity invested * 100, to 2 decimals."""
    return round_to(safe_divide(cash_flow, equity) * 100, 2)


def price_per_unit(price: Any, units: Any) -> int:
    """Price per unit, rounded to the nearest whole dollar."""
    return int(round_to(safe_divide(price, units), 0))


@dataclass(frozen=True)
class UnderwritingMetrics:
    """Snapshot of underwriting ratios for one deal or property."""

    total_basis: float
    cap_rate: float
    yield_on_cost: float
    dscr: float
    ltv: float
    cash_on_cash: float
    price_per_unit: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def underwrite(inputs: Mapping[str, Any]) -> UnderwritingMetrics:
    """
    Compute every underwriting ratio from a flat field set.

    Args:
        inputs: Mapping with any of purchase_price, closing_costs,
            rehab_budget, units, noi, projected_noi, loan_balance,
            valuation, annual_debt_service, cash_flow, equity_invested.
            Missing keys count as 0.

    Returns:
        UnderwritingMetrics
    """
    price = inputs.get("purchase_price")
    basis = total_basis(price, inputs.get("closing_costs"), inputs.get("rehab_budget"))

    return UnderwritingMetrics(
        total_basis=basis,
        cap_rate=cap_rate(inputs.get("noi"), price),
        yield_on_cost=yield_on_cost(inputs.get("projected_noi"), basis),
        dscr=dscr(inputs.get("noi"), inputs.get("annual_debt_service")),
        ltv=ltv(inputs.get("loan_balance"), inputs.get("valuation")),
        cash_on_cash=cash_on_cash(inputs.get("cash_flow"), inputs.get("equity_invested")),
        price_per_unit=price_per_unit(price, inputs.get("units")),
    )
