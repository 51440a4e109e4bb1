from decimal import Decimal
from sqlmodel import Session, select
from storefront.core.security import get_password_hash
from storefront.db.session import engine, create_db_and_tables
from storefront.models.catalog import CatalogItem
from storefront.models.user import Role, User

ADMIN_EMAIL = "admin@storefront.local"
ADMIN_PASSWORD = "ChangeMe123!"

def seed_catalog():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        if not session.exec(select(User).where(User.email == ADMIN_EMAIL)).first():
            session.add(User(
                email=ADMIN_EMAIL,
                name="Store Admin",
                password_hash=get_password_hash(ADMIN_PASSWORD),
                role=Role.ADMIN,
            ))
            print(f"Created admin {ADMIN_EMAIL}")

        # Check if items already exist to avoid duplicates
        existing_items = session.exec(select(CatalogItem)).all()
        if existing_items:
            print(f"Database already contains {len(existing_items)} catalog items. Skipping seed.")
            session.commit()
            return

        print("Seeding initial catalog...")
        items = [
            CatalogItem(
                name="Wireless Headphones",
                description="Over-ear, noise cancelling, 30 hour battery.",
                unit_price=Decimal("29.99"),
                stock_quantity=10,
            ),
            CatalogItem(
                name="USB-C Charger 65W",
                description="GaN wall charger with two USB-C ports.",
                unit_price=Decimal("29.99"),
                stock_quantity=25,
            ),
            CatalogItem(
                name="Margherita Pizza",
                description="Tomato, mozzarella, basil.",
                unit_price=Decimal("12.50"),
                stock_quantity=100,
            ),
            CatalogItem(
                name="Jazz Night - General Admission",
                description="Standing ticket, doors at 19:00.",
                unit_price=Decimal("45.00"),
                stock_quantity=200,
            ),
        ]

        for item in items:
            session.add(item)

        session.commit()
        print(f"Successfully seeded {len(items)} catalog items!")

if __name__ == "__main__":
    seed_catalog()
