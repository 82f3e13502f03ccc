"""
Deal Analysis

Turns a raw pipeline deal (income, expenses, debt, cost figures) into the
headline numbers shown on the deal analyzer: NOI, cash flow, project cost,
equity required and the underwriting ratios built on them.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from app.calculations import underwriting
from app.calculations.numeric import positive_or_default, to_number
from app.calculations.policy import DEFAULT_POLICY, EnginePolicy
from app.calculations.waterfall import HoldPeriodDistribution, distribute_over_hold


@dataclass(frozen=True)
class DealAnalysis:
    noi: float
    cash_flow: float
    total_cost: float  # Price + capex; closing costs are not in the analyzer's cost
    equity_required: float
    cap_rate: float
    yield_on_cost: float
    cash_on_cash: float
    ltc: float
    dscr: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def analyze_deal(deal: Mapping[str, Any]) -> DealAnalysis:
    """
    Analyze a deal from its raw fields.

    Args:
        deal: Mapping with purchase_price, total_capex, annual_gross_income,
            annual_expenses, annual_debt_service and loan_amount. Missing
            keys count as 0.

    Returns:
        DealAnalysis with ratios in percent units (DSCR as a multiple)
    """
    price = to_number(deal.get("purchase_price"))
    debt_service = to_number(deal.get("annual_debt_service"))
    loan_amount = to_number(deal.get("loan_amount"))

    noi = to_number(deal.get("annual_gross_income")) - to_number(deal.get("annual_expenses"))
    cash_flow = noi - debt_service
    total_cost = price + to_number(deal.get("total_capex"))
    equity_required = total_cost - loan_amount

    return DealAnalysis(
        noi=noi,
        cash_flow=cash_flow,
        total_cost=total_cost,
        equity_required=equity_required,
        cap_rate=underwriting.cap_rate(noi, price),
        yield_on_cost=underwriting.yield_on_cost(noi, total_cost),
        cash_on_cash=underwriting.cash_on_cash(cash_flow, equity_required),
        ltc=underwriting.ltc(loan_amount, total_cost),
        dscr=underwriting.dscr(noi, debt_service),
    )


def distribute_deal_over_hold(
    analysis: DealAnalysis,
    pref_rate: Any = None,
    gp_split: Any = None,
    hold_years: Any = None,
    policy: EnginePolicy = DEFAULT_POLICY,
) -> HoldPeriodDistribution:
    """
    Hold-period waterfall sized from a deal's own analysis.

    Total profit is annual cash flow times the hold; the pref accrues on
    equity required. Negative cash flow or equity count as 0.
    """
    years, _ = positive_or_default(hold_years, policy.default_hold_years)

    return distribute_over_hold(
        total_profit=max(0.0, analysis.cash_flow) * years,
        invested_capital=max(0.0, analysis.equity_required),
        pref_rate=pref_rate,
        gp_split=gp_split,
        hold_years=hold_years,
        policy=policy,
    )
