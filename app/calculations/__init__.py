"""
Financial Calculation Engine

Pure calculation routines for real estate underwriting: numeric
normalization, underwriting ratios, capital stack and LP/GP waterfall.
Nothing here reads or writes storage.
"""

from app.calculations import numeric, underwriting, capital_stack, waterfall, deal_analysis
from app.calculations.policy import DEFAULT_POLICY, EnginePolicy

__all__ = [
    "numeric",
    "underwriting",
    "capital_stack",
    "waterfall",
    "deal_analysis",
    "DEFAULT_POLICY",
    "EnginePolicy",
]
