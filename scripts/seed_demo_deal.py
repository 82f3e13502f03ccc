"""
Seed the database with a demo multifamily deal and a held property.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.database import session_scope, init_db
from app.db.models import Deal, Property

DEMO_DEAL_NAME = "Maple Court Apartments"
DEMO_PROPERTY_NAME = "Riverside Flats"


def main():
    init_db()

    with session_scope() as db:
        existing = db.query(Deal).filter(Deal.name == DEMO_DEAL_NAME).first()
        if existing:
            print(f"Deal '{DEMO_DEAL_NAME}' already exists (ID: {existing.id})")
            return

        deal = Deal(
            name=DEMO_DEAL_NAME,
            address="410 Maple Ct, Columbus, OH",
            stage="Underwriting",
            units=40,
            purchase_price=1000000,
            closing_costs=20000,
            total_capex=50000,
            annual_gross_income=150000,
            annual_expenses=70000,  # NOI of 80k, an 8% cap
            annual_debt_service=48000,
            loan_amount=700000,
            ltv_percent=70,
            pref_rate=0.08,
            gp_promote_percent=20,
        )
        db.add(deal)

        prop = Property(
            name=DEMO_PROPERTY_NAME,
            address="12 River Rd, Dayton, OH",
            units=24,
            purchase_price=2400000,
            noi=168000,
            loan_balance=1560000,
            valuation=2600000,
        )
        db.add(prop)
        db.flush()

        print(f"Created deal: {deal.name} (ID: {deal.id})")
        print(f"Created property: {prop.name} (ID: {prop.id})")

    print("\nDemo data created successfully!")


if __name__ == "__main__":
    main()
