"""
Deal pipeline API endpoints.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Optional, List
from sqlalchemy.orm import Session

from app.api.calculations import (
    CapitalStackResponse,
    DealAnalysisResponse,
    DistributionResponse,
    HoldWaterfallResponse,
)
from app.calculations import capital_stack, deal_analysis, waterfall
from app.calculations.policy import EnginePolicy
from app.config import get_engine_policy
from app.db.database import get_db
from app.db.models import Deal

logger = logging.getLogger(__name__)

router = APIRouter()


class DealCreate(BaseModel):
    """Schema for creating a deal."""

    name: str
    address: Optional[str] = None
    stage: str = "Sourced"
    units: Optional[int] = None
    purchase_price: Optional[float] = None
    closing_costs: Optional[float] = None
    total_capex: Optional[float] = None
    annual_gross_income: Optional[float] = None
    annual_expenses: Optional[float] = None
    annual_debt_service: Optional[float] = None
    loan_amount: Optional[float] = None
    ltv_percent: Optional[float] = None
    pref_rate: Optional[float] = None
    gp_promote_percent: Optional[float] = None
    total_lp_capital: Optional[float] = None


class DealUpdate(BaseModel):
    """Schema for updating a deal."""

    name: Optional[str] = None
    address: Optional[str] = None
    stage: Optional[str] = None
    units: Optional[int] = None
    purchase_price: Optional[float] = None
    closing_costs: Optional[float] = None
    total_capex: Optional[float] = None
    annual_gross_income: Optional[float] = None
    annual_expenses: Optional[float] = None
    annual_debt_service: Optional[float] = None
    loan_amount: Optional[float] = None
    ltv_percent: Optional[float] = None
    pref_rate: Optional[float] = None
    gp_promote_percent: Optional[float] = None
    total_lp_capital: Optional[float] = None


class DealResponse(DealCreate):
    """Schema for deal response."""

    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class DealListResponse(BaseModel):
    """Response for listing deals."""

    deals: List[DealResponse]
    total: int


class DealAnalysisReport(BaseModel):
    """Analyzer output for a saved deal."""

    deal_id: str
    analysis: DealAnalysisResponse
    capital_stack: CapitalStackResponse
    distribution: DistributionResponse
    hold_distribution: HoldWaterfallResponse


DEAL_FIELDS = list(DealCreate.model_fields)


def deal_to_response(deal: Deal) -> DealResponse:
    """Convert Deal model to response schema."""
    return DealResponse(
        id=deal.id,
        **{field: getattr(deal, field) for field in DEAL_FIELDS},
        created_at=deal.created_at.isoformat() if deal.created_at else None,
        updated_at=deal.updated_at.isoformat() if deal.updated_at else None,
    )


def deal_to_fields(deal: Deal) -> dict:
    """Raw field set the calculation engine reads from."""
    return {field: getattr(deal, field) for field in DEAL_FIELDS}


def _get_deal_or_404(db: Session, deal_id: str) -> Deal:
    db_deal = (
        db.query(Deal)
        .filter(Deal.id == deal_id, Deal.is_deleted == False)
        .first()
    )
    if not db_deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return db_deal


@router.get("/", response_model=DealListResponse)
async def list_deals(
    skip: int = 0,
    limit: int = 100,
    stage: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List deals with optional stage filter."""
    query = db.query(Deal).filter(Deal.is_deleted == False)

    if stage:
        query = query.filter(Deal.stage == stage)

    total = query.count()
    deals = query.offset(skip).limit(limit).all()

    return DealListResponse(
        deals=[deal_to_response(d) for d in deals],
        total=total,
    )


@router.post("/", response_model=DealResponse, status_code=201)
async def create_deal(
    deal_data: DealCreate,
    db: Session = Depends(get_db),
):
    """Save a deal to the pipeline."""
    db_deal = Deal(**deal_data.model_dump())

    db.add(db_deal)
    db.commit()
    db.refresh(db_deal)
    logger.info(f"Created deal {db_deal.id} ({db_deal.name})")

    return deal_to_response(db_deal)


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: str,
    db: Session = Depends(get_db),
):
    """Get a deal by ID."""
    return deal_to_response(_get_deal_or_404(db, deal_id))


@router.put("/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: str,
    deal_data: DealUpdate,
    db: Session = Depends(get_db),
):
    """Update a deal."""
    db_deal = _get_deal_or_404(db, deal_id)

    # Update only provided fields
    update_data = deal_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_deal, field, value)

    db.commit()
    db.refresh(db_deal)

    return deal_to_response(db_deal)


@router.delete("/{deal_id}")
async def delete_deal(
    deal_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a deal."""
    db_deal = _get_deal_or_404(db, deal_id)

    db_deal.is_deleted = True
    db.commit()
    logger.info(f"Deleted deal {deal_id}")

    return {"deleted": True, "id": deal_id}


@router.get("/{deal_id}/analysis", response_model=DealAnalysisReport)
async def analyze_saved_deal(
    deal_id: str,
    db: Session = Depends(get_db),
    policy: EnginePolicy = Depends(get_engine_policy),
):
    """
    Run the analyzer on a saved deal.

    The deal's annual cash flow is distributed through its waterfall terms.
    When the deal has no LP capital figure, LP equity from its capital
    stack is used instead. The hold-period split treats annual cash flow
    times the default hold as total profit, with the pref accruing on
    equity required.
    """
    fields = deal_to_fields(_get_deal_or_404(db, deal_id))

    analysis = deal_analysis.analyze_deal(fields)
    stack = capital_stack.build_capital_stack(
        fields["purchase_price"], fields["ltv_percent"], fields["total_capex"], policy
    )

    lp_capital = fields["total_lp_capital"]
    if lp_capital is None:
        lp_capital = stack.lp_equity

    terms = waterfall.WaterfallTerms(
        pref_rate=fields["pref_rate"],
        gp_promote_percent=fields["gp_promote_percent"],
        total_lp_capital=lp_capital,
    )
    distribution = waterfall.distribute(analysis.cash_flow, terms, policy)
    hold_distribution = deal_analysis.distribute_deal_over_hold(
        analysis,
        pref_rate=fields["pref_rate"],
        gp_split=fields["gp_promote_percent"],
        policy=policy,
    )

    return DealAnalysisReport(
        deal_id=deal_id,
        analysis=analysis.to_dict(),
        capital_stack=stack.to_dict(),
        distribution=distribution.to_dict(),
        hold_distribution=hold_distribution.to_dict(),
    )
