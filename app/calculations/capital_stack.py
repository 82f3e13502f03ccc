"""
Capital Stack

Splits acquisition cost into senior debt and equity, then splits the
equity between GP co-invest and LP capital.
"""

import logging
import math
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Tuple

from app.calculations.numeric import non_negative, to_number
from app.calculations.policy import DEFAULT_POLICY, EnginePolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapitalStack:
    """Debt/equity composition of an acquisition."""

    debt_amount: float
    total_equity_required: float
    gp_equity: float
    lp_equity: float
    defaulted: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["defaulted"] = list(self.defaulted)
        return data


def _resolve_ltv(ltv_percent: Any, policy: EnginePolicy) -> Tuple[float, bool]:
    """LTV as a fraction; falls back to policy unless it lies in (0, 1]."""
    ltv = to_number(ltv_percent) / 100
    if math.isfinite(ltv) and 0 < ltv <= 1:
        return ltv, False
    return policy.default_ltv, True


def build_capital_stack(
    purchase_price: Any,
    ltv_percent: Any,
    total_capex: Any,
    policy: EnginePolicy = DEFAULT_POLICY,
) -> CapitalStack:
    """
    Build the capital stack for an acquisition.

    Debt is sized off purchase price only; capex is funded entirely with
    equity. By construction debt + equity == price + capex.

    Args:
        purchase_price: Acquisition price (negative clamps to 0)
        ltv_percent: Loan-to-value in percent units (e.g., 70 for 70%)
        total_capex: Capital expenditure budget (negative clamps to 0)
        policy: Default LTV and GP/LP equity split

    Returns:
        CapitalStack
    """
    price = non_negative(purchase_price)
    capex = non_negative(total_capex)

    ltv, ltv_defaulted = _resolve_ltv(ltv_percent, policy)
    if ltv_defaulted:
        logger.debug(f"LTV {ltv_percent!r} unusable, using default {policy.default_ltv}")

    debt_amount = price * ltv
    total_equity = price - debt_amount + capex
    gp_equity = total_equity * policy.gp_equity_share
    lp_equity = total_equity * policy.lp_equity_share

    return CapitalStack(
        debt_amount=debt_amount,
        total_equity_required=total_equity,
        gp_equity=gp_equity,
        lp_equity=lp_equity,
        defaulted=("ltv_percent",) if ltv_defaulted else (),
    )
