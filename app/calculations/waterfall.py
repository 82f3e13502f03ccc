"""
Waterfall Distribution Calculations

Allocates a single period's distributable cash between limited partners
(LP) and the general partner (GP) through a two-tier structure:

1. Preferred Return - LP receives pref_rate on total LP capital, paid in
   full before anything else
2. Promote Split - Cash above the pref is split, with the GP taking
   gp_promote_percent as promote and the LP taking the rest

Also provides a hold-period variant where the pref accrues simply over a
number of years against total profit.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional, Tuple

from app.calculations.numeric import non_negative, positive_or_default, to_number
from app.calculations.policy import DEFAULT_POLICY, EnginePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaterfallTerms:
    """Deal terms for a two-tier waterfall. Values may be raw field input."""

    pref_rate: Any = None  # Annual pref as a fraction (e.g., 0.08 for 8%)
    gp_promote_percent: Any = None  # GP promote in percent units (e.g., 20)
    total_lp_capital: Any = None


@dataclass(frozen=True)
class DistributionBreakdown:
    pref: float
    promote: float
    excess_lp: float


@dataclass(frozen=True)
class DistributionResult:
    """
    Result of a two-tier distribution.

    `remaining` is the size of the tier-2 pool before the promote split.
    Tier 2 always allocates that pool in full, so it is never cash left
    undistributed: lp_total + gp_total equals the distributable cash.
    """

    lp_total: float
    gp_total: float
    remaining: float
    breakdown: DistributionBreakdown
    defaulted: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["defaulted"] = list(self.defaulted)
        return data


def _resolve_promote(gp_promote_percent: Any, policy: EnginePolicy) -> Tuple[float, bool]:
    """GP promote as a fraction; falls back to policy unless it lies in (0, 1]."""
    promote = to_number(gp_promote_percent) / 100
    if 0 < promote <= 1:
        return promote, False
    return policy.default_gp_promote, True


def distribute(
    distributable_cash: Any,
    terms: Optional[WaterfallTerms] = None,
    policy: EnginePolicy = DEFAULT_POLICY,
) -> DistributionResult:
    """
    Run distributable cash through the pref + promote waterfall.

    Args:
        distributable_cash: Cash available this period (negative clamps to 0)
        terms: WaterfallTerms; missing or non-positive terms use policy defaults
        policy: Default pref rate, promote and LP capital floor

    Returns:
        DistributionResult
    """
    if terms is None:
        terms = WaterfallTerms()

    cash = non_negative(distributable_cash)
    defaulted = []

    pref_rate, used_default = positive_or_default(terms.pref_rate, policy.default_pref_rate)
    if used_default:
        defaulted.append("pref_rate")

    gp_promote, used_default = _resolve_promote(terms.gp_promote_percent, policy)
    if used_default:
        defaulted.append("gp_promote_percent")

    lp_capital, used_default = positive_or_default(
        terms.total_lp_capital, policy.lp_capital_floor
    )
    if used_default:
        defaulted.append("total_lp_capital")

    if defaulted:
        logger.debug(f"Waterfall terms defaulted: {', '.join(defaulted)}")

    # === TIER 1: Preferred Return ===
    pref_amount = lp_capital * pref_rate
    lp_pref_payment = min(cash, pref_amount)
    remaining_cash = cash - lp_pref_payment

    # === TIER 2: Promote Split ===
    gp_promote_payment = 0.0
    lp_excess = 0.0
    if remaining_cash > 0:
        gp_promote_payment = remaining_cash * gp_promote
        lp_excess = remaining_cash - gp_promote_payment

    return DistributionResult(
        lp_total=lp_pref_payment + lp_excess,
        gp_total=gp_promote_payment,
        remaining=max(0.0, remaining_cash),
        breakdown=DistributionBreakdown(
            pref=lp_pref_payment,
            promote=gp_promote_payment,
            excess_lp=lp_excess,
        ),
        defaulted=tuple(defaulted),
    )


@dataclass(frozen=True)
class HoldPeriodDistribution:
    """Result of a hold-period waterfall over total deal profit."""

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
    defaulted: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["defaulted"] = list(self.defaulted)
        return data


def normalize_rate(value: Any, default: float) -> Tuple[float, bool]:
    """
    Accept a rate in either fraction (0.08) or percent (8) form.

    Values above 1 are read as percents. Missing values, non-positive
    values and anything above 100% return the default.
    """
    rate = to_number(value)
    if rate > 1:
        rate = rate / 100
    if 0 < rate <= 1:
        return rate, False
    return default, True


def distribute_over_hold(
    total_profit: Any,
    invested_capital: Any,
    pref_rate: Any = None,
    gp_split: Any = None,
    hold_years: Any = None,
    policy: EnginePolicy = DEFAULT_POLICY,
) -> HoldPeriodDistribution:
    """
    Split total deal profit with a simple pref accrued over the hold.

    pref_accrual = invested_capital * pref_rate * hold_years. The LP gets
    profit up to the accrual; the GP takes gp_split of what is left.

    Args:
        total_profit: Profit to distribute over the whole hold (negative clamps to 0)
        invested_capital: LP capital the pref accrues on
        pref_rate: Annual pref, fraction or percent form
        gp_split: GP share above the pref, fraction or percent form
        hold_years: Years the pref accrues for

    Returns:
        HoldPeriodDistribution
    """
    profit = non_negative(total_profit)
    capital = non_negative(invested_capital)
    defaulted = []

    rate, used_default = normalize_rate(pref_rate, policy.default_pref_rate)
    if used_default:
        defaulted.append("pref_rate")

    split, used_default = normalize_rate(gp_split, policy.default_gp_promote)
    if used_default:
        defaulted.append("gp_split")

    years, used_default = positive_or_default(hold_years, policy.default_hold_years)
    if used_default:
        defaulted.append("hold_years")

    pref_accrual = capital * rate * years
    pref_payment = min(profit, pref_accrual)

    remaining = max(0.0, profit - pref_payment)
    gp_promote = remaining * split
    lp_share = remaining - gp_promote

    return HoldPeriodDistribution(
        lp_total=pref_payment + lp_share,
        gp_total=gp_promote,
        total_profit=profit,
        hold_years=years,
        pref_rate=rate,
        gp_split=split,
        pref_accrual=pref_accrual,
        pref_payment=pref_payment,
        remaining=remaining,
        is_pref_met=profit >= pref_accrual,
        defaulted=tuple(defaulted),
    )
