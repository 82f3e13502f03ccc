"""
SQLAlchemy ORM models for deal and property records.

The calculation engine never touches these; API handlers read a record
and pass its raw fields into the engine.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
)
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class Deal(AuditMixin, Base):
    """Pipeline deal with the raw figures the analyzer works from."""

    __tablename__ = "deals"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    address = Column(String(255))
    stage = Column(String(50), default="Sourced")
    units = Column(Integer)

    # Acquisition
    purchase_price = Column(Float)
    closing_costs = Column(Float)
    total_capex = Column(Float)

    # Operations (annual)
    annual_gross_income = Column(Float)
    annual_expenses = Column(Float)
    annual_debt_service = Column(Float)

    # Financing
    loan_amount = Column(Float)
    ltv_percent = Column(Float)  # Percent units, e.g. 70

    # Waterfall terms
    pref_rate = Column(Float)  # Fraction, e.g. 0.08
    gp_promote_percent = Column(Float)  # Percent units, e.g. 20
    total_lp_capital = Column(Float)


class Property(AuditMixin, Base):
    """Owned asset in the portfolio."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    address = Column(String(255))
    property_type = Column(String(50), default="multifamily")
    units = Column(Integer)

    purchase_price = Column(Float)
    noi = Column(Float)
    loan_balance = Column(Float)
    valuation = Column(Float)
