"""
Property management API endpoints.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Optional, List
from sqlalchemy.orm import Session

from app.calculations import underwriting
from app.db.database import get_db
from app.db.models import Property

logger = logging.getLogger(__name__)

router = APIRouter()


class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    name: str
    address: Optional[str] = None
    property_type: str = "multifamily"
    units: Optional[int] = None
    purchase_price: Optional[float] = None
    noi: Optional[float] = None
    loan_balance: Optional[float] = None
    valuation: Optional[float] = None


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    name: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    units: Optional[int] = None
    purchase_price: Optional[float] = None
    noi: Optional[float] = None
    loan_balance: Optional[float] = None
    valuation: Optional[float] = None


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: str
    name: str
    address: Optional[str]
    property_type: str
    units: Optional[int]
    purchase_price: Optional[float]
    noi: Optional[float]
    loan_balance: Optional[float]
    valuation: Optional[float]
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class PropertyListResponse(BaseModel):
    """Response for listing properties."""

    properties: List[PropertyResponse]
    total: int


class PropertyMetrics(BaseModel):
    """Portfolio metrics for a held property."""

    property_id: str
    ltv: float
    cap_rate: float
    price_per_unit: int
    equity: float


def property_to_response(prop: Property) -> PropertyResponse:
    """Convert Property model to response schema."""
    return PropertyResponse(
        id=prop.id,
        name=prop.name,
        address=prop.address,
        property_type=prop.property_type or "multifamily",
        units=prop.units,
        purchase_price=prop.purchase_price,
        noi=prop.noi,
        loan_balance=prop.loan_balance,
        valuation=prop.valuation,
        created_at=prop.created_at.isoformat() if prop.created_at else None,
        updated_at=prop.updated_at.isoformat() if prop.updated_at else None,
    )


def _get_property_or_404(db: Session, property_id: str) -> Property:
    db_property = (
        db.query(Property)
        .filter(Property.id == property_id, Property.is_deleted == False)
        .first()
    )
    if not db_property:
        raise HTTPException(status_code=404, detail="Property not found")
    return db_property


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    skip: int = 0,
    limit: int = 100,
    property_type: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List all properties with optional filtering."""
    query = db.query(Property).filter(Property.is_deleted == False)

    if property_type:
        query = query.filter(Property.property_type == property_type)

    total = query.count()
    properties = query.offset(skip).limit(limit).all()

    return PropertyListResponse(
        properties=[property_to_response(p) for p in properties],
        total=total,
    )


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    db: Session = Depends(get_db),
):
    """Create a new property."""
    db_property = Property(**property_data.model_dump())

    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    logger.info(f"Created property {db_property.id} ({db_property.name})")

    return property_to_response(db_property)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_to_response(_get_property_or_404(db, property_id))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    property_data: PropertyUpdate,
    db: Session = Depends(get_db),
):
    """Update a property."""
    db_property = _get_property_or_404(db, property_id)

    # Update only provided fields
    update_data = property_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_property, field, value)

    db.commit()
    db.refresh(db_property)

    return property_to_response(db_property)


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a property."""
    db_property = _get_property_or_404(db, property_id)

    db_property.is_deleted = True
    db.commit()
    logger.info(f"Deleted property {property_id}")

    return {"deleted": True, "id": property_id}


@router.get("/{property_id}/metrics", response_model=PropertyMetrics)
async def get_property_metrics(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Leverage and valuation metrics for a held property."""
    prop = _get_property_or_404(db, property_id)

    valuation = prop.valuation or 0.0
    loan_balance = prop.loan_balance or 0.0

    return PropertyMetrics(
        property_id=prop.id,
        ltv=underwriting.ltv(loan_balance, valuation),
        cap_rate=underwriting.cap_rate(prop.noi, valuation or prop.purchase_price),
        price_per_unit=underwriting.price_per_unit(prop.purchase_price, prop.units),
        equity=valuation - loan_balance,
    )
