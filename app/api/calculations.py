"""
Financial calculation API endpoints.

These endpoints accept raw field values (numbers or numeric strings) and
return raw numbers. Formatting for display is left to the client.
Malformed numbers are normalized by the engine rather than rejected.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List, Optional, Union

from app.calculations import capital_stack, deal_analysis, underwriting, waterfall
from app.calculations.policy import EnginePolicy
from app.config import get_engine_policy

router = APIRouter()

RawValue = Optional[Union[float, str]]


class UnderwritingInput(BaseModel):
    """Raw figures for underwriting ratios."""

    purchase_price: RawValue = None
    closing_costs: RawValue = None
    rehab_budget: RawValue = None
    units: RawValue = None
    noi: RawValue = None
    projected_noi: RawValue = None
    loan_balance: RawValue = None
    valuation: RawValue = None
    annual_debt_service: RawValue = None
    cash_flow: RawValue = None
    equity_invested: RawValue = None


class UnderwritingResponse(BaseModel):
    total_basis: float
    cap_rate: float
    yield_on_cost: float
    dscr: float
    ltv: float
    cash_on_cash: float
    price_per_unit: int


@router.post("/underwriting", response_model=UnderwritingResponse)
async def calculate_underwriting(inputs: UnderwritingInput):
    """Calculate underwriting ratios for a deal or property."""
    metrics = underwriting.underwrite(inputs.model_dump())
    return metrics.to_dict()


class CapitalStackInput(BaseModel):
    """Acquisition economics for the capital stack."""

    purchase_price: RawValue = None
    ltv_percent: RawValue = None
    total_capex: RawValue = None


class CapitalStackResponse(BaseModel):
    debt_amount: float
    total_equity_required: float
    gp_equity: float
    lp_equity: float
    defaulted: List[str] = []


@router.post("/capital-stack", response_model=CapitalStackResponse)
async def calculate_capital_stack(
    inputs: CapitalStackInput,
    policy: EnginePolicy = Depends(get_engine_policy),
):
    """Split acquisition cost into debt, GP equity and LP equity."""
    stack = capital_stack.build_capital_stack(
        inputs.purchase_price, inputs.ltv_percent, inputs.total_capex, policy
    )
    return stack.to_dict()


class WaterfallInput(BaseModel):
    """
    Distributable cash and deal terms.

    If total_lp_capital is omitted and capital_stack is given, LP equity
    from that capital stack is used as total LP capital.
    """

    distributable_cash: RawValue = None
    pref_rate: RawValue = None
    gp_promote_percent: RawValue = None
    total_lp_capital: RawValue = None
    capital_stack: Optional[CapitalStackInput] = None


class DistributionBreakdownResponse(BaseModel):
    pref: float
    promote: float
    excess_lp: float


class DistributionResponse(BaseModel):
    lp_total: float
    gp_total: float
    remaining: float
    breakdown: DistributionBreakdownResponse
    defaulted: List[str] = []
    capital_stack: Optional[CapitalStackResponse] = None


@router.post("/waterfall", response_model=DistributionResponse)
async def calculate_waterfall(
    inputs: WaterfallInput,
    policy: EnginePolicy = Depends(get_engine_policy),
):
    """Run distributable cash through the pref + promote waterfall."""
    total_lp_capital = inputs.total_lp_capital
    stack = None

    if inputs.capital_stack is not None:
        stack = capital_stack.build_capital_stack(
            inputs.capital_stack.purchase_price,
            inputs.capital_stack.ltv_percent,
            inputs.capital_stack.total_capex,
            policy,
        )
        if total_lp_capital is None:
            total_lp_capital = stack.lp_equity

    terms = waterfall.WaterfallTerms(
        pref_rate=inputs.pref_rate,
        gp_promote_percent=inputs.gp_promote_percent,
        total_lp_capital=total_lp_capital,
    )
    result = waterfall.distribute(inputs.distributable_cash, terms, policy)

    response = result.to_dict()
    if stack is not None:
        response["capital_stack"] = stack.to_dict()
    return response


class HoldWaterfallInput(BaseModel):
    """Total profit over a hold period and the terms to split it."""

    total_profit: RawValue = None
    invested_capital: RawValue = None
    pref_rate: RawValue = None
    gp_split: RawValue = None
    hold_years: RawValue = None


class HoldWaterfallResponse(BaseModel):
    lp_total: float
    gp_total: float
    total_profit: float
    hold_years: float
    pref_rate: float
    gp_split: float
    pref_accrual: float
    pref_payment: float
    remaining: float
    is_pref_met: bool
    defaulted: List[str] = []


@router.post("/hold-waterfall", response_model=HoldWaterfallResponse)
async def calculate_hold_waterfall(
    inputs: HoldWaterfallInput,
    policy: EnginePolicy = Depends(get_engine_policy),
):
    """Split total profit with a pref accrued over the hold period."""
    result = waterfall.distribute_over_hold(
        total_profit=inputs.total_profit,
        invested_capital=inputs.invested_capital,
        pref_rate=inputs.pref_rate,
        gp_split=inputs.gp_split,
        hold_years=inputs.hold_years,
        policy=policy,
    )
    return result.to_dict()


class DealAnalysisInput(BaseModel):
    """Raw deal analyzer fields."""

    purchase_price: RawValue = None
    total_capex: RawValue = None
    annual_gross_income: RawValue = None
    annual_expenses: RawValue = None
    annual_debt_service: RawValue = None
    loan_amount: RawValue = None


class DealAnalysisResponse(BaseModel):
    noi: float
    cash_flow: float
    total_cost: float
    equity_required: float
    cap_rate: float
    yield_on_cost: float
    cash_on_cash: float
    ltc: float
    dscr: float


@router.post("/deal-analysis", response_model=DealAnalysisResponse)
async def calculate_deal_analysis(inputs: DealAnalysisInput):
    """Analyze a draft deal without saving it."""
    return deal_analysis.analyze_deal(inputs.model_dump()).to_dict()
