"""
Engine Policy

Fallback values the engine substitutes when a caller omits or mangles a
term. These are business policy, not derived numbers, so they live in one
place and can be overridden per call or via application settings.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class EnginePolicy:
    """Policy constants for capital stack and waterfall calculations."""

    default_ltv: float = 0.70  # Senior debt as a fraction of price
    gp_equity_share: float = 0.10  # GP co-invest share of total equity
    default_pref_rate: float = 0.08  # LP preferred return
    default_gp_promote: float = 0.20  # GP share of cash above the pref
    lp_capital_floor: float = 1.0  # Stand-in when LP capital is missing
    default_hold_years: float = 5.0

    @property
    def lp_equity_share(self) -> float:
        return 1.0 - self.gp_equity_share

    def with_overrides(self, **overrides) -> "EnginePolicy":
        """Return a copy with the given fields replaced (None means keep)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


DEFAULT_POLICY = EnginePolicy()
