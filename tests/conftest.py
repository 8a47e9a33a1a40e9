from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from gigconnect import config
from gigconnect.database import Database
from gigconnect.main import create_app
from gigconnect.models import (
    AvailabilitySlot,
    Booking,
    Payment,
    Review,
    Service,
    ServiceCategory,
    User,
    Vendor,
)

TODAY = date(2026, 3, 15)


@pytest.fixture
def database():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, _record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    db_handle = Database(engine)
    db_handle.create_all()
    yield db_handle
    db_handle.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    return TestClient(create_app(database=database))


@pytest.fixture
def static_client(monkeypatch):
    """App running without any configured database"""
    monkeypatch.setattr(config, "DATABASE_URL", None)
    return TestClient(create_app())


class Seeder:
    """Small helpers for inserting marketplace rows"""

    def __init__(self, db):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def user(self, email, role="customer", name=None, created_at=None):
        return self._add(
            User(email=email, role=role, name=name or email.split("@")[0], created_at=created_at or datetime(2025, 1, 1))
        )

    def vendor(self, user, business_name, service_area=None):
        return self._add(Vendor(user_id=user.id, business_name=business_name, service_area=service_area, is_verified=True))

    def category(self, name):
        return self._add(ServiceCategory(name=name))

    def service(self, vendor, category, title, price, duration_minutes=60, is_active=True, image_url=None, description=None):
        return self._add(
            Service(
                vendor_id=vendor.id,
                category_id=category.id,
                title=title,
                description=description or f"{title} description",
                price=price,
                duration_minutes=duration_minutes,
                is_active=is_active,
                image_url=image_url,
            )
        )

    def slot(self, vendor, slot_date):
        return self._add(AvailabilitySlot(vendor_id=vendor.id, slot_date=slot_date))

    def booking(self, customer, service, status, booking_date, slot=None):
        return self._add(
            Booking(
                customer_id=customer.id,
                service_id=service.id,
                status=status,
                booking_date=booking_date,
                slot_id=slot.id if slot else None,
            )
        )

    def payment(self, booking, amount, payment_status, payment_date=None):
        return self._add(
            Payment(booking_id=booking.id, amount=amount, payment_status=payment_status, payment_date=payment_date)
        )

    def review(self, booking, rating, moderation_status="approved"):
        return self._add(Review(booking_id=booking.id, rating=rating, moderation_status=moderation_status))


@pytest.fixture
def seeder(db):
    return Seeder(db)


@pytest.fixture
def marketplace(db, seeder):
    """Two vendors, two customers and a spread of bookings around TODAY (2026-03-15)"""
    s = seeder
    admin = s.user("admin@example.com", role="admin", created_at=datetime(2025, 1, 1))
    customer = s.user("casey@example.com", name="Casey Customer", created_at=datetime(2026, 3, 1))
    other_customer = s.user("jordan@example.com", name="Jordan Doe", created_at=datetime(2026, 2, 10))
    vendor_user = s.user("stylehub@example.com", role="vendor", created_at=datetime(2025, 11, 5))
    new_vendor_user = s.user("cleanpro@example.com", role="vendor", created_at=datetime(2026, 3, 3))

    vendor = s.vendor(vendor_user, "StyleHub Studio", "New York, NY")
    new_vendor = s.vendor(new_vendor_user, "CleanPro Services", "Brooklyn, NY")

    beauty = s.category("Beauty & Spa")
    home = s.category("Home Services")

    haircut = s.service(vendor, beauty, "Haircut", 100)
    coloring = s.service(vendor, beauty, "Coloring", 50)
    unbooked = s.service(vendor, beauty, "Beard Trim", 30)
    cleaning = s.service(new_vendor, home, "Deep Cleaning", 80)

    future_slot = s.slot(vendor, date(2026, 3, 20))
    past_slot = s.slot(vendor, date(2026, 3, 1))

    b1 = s.booking(customer, haircut, "completed", datetime(2026, 3, 2, 10), slot=future_slot)
    b2 = s.booking(customer, coloring, "accepted", datetime(2026, 3, 10, 9), slot=future_slot)
    b3 = s.booking(customer, haircut, "pending", datetime(2026, 3, 11, 12))
    b4 = s.booking(customer, haircut, "completed", datetime(2026, 2, 5, 15), slot=past_slot)
    b5 = s.booking(customer, coloring, "cancelled", datetime(2026, 2, 20, 11))
    b6 = s.booking(customer, haircut, "completed", datetime(2025, 12, 1, 10))
    b7 = s.booking(other_customer, cleaning, "accepted", datetime(2026, 3, 5, 8))

    s.payment(b1, 100, "success", datetime(2026, 3, 3, 9))
    s.payment(b2, 50, "success", datetime(2026, 3, 11, 9))
    s.payment(b4, 100, "success", datetime(2026, 2, 6, 9))
    s.payment(b3, 100, "pending", None)
    s.payment(b5, 50, "failed", datetime(2026, 2, 21, 9))

    s.review(b1, 5)
    s.review(b4, 4)
    s.review(b6, 5)
    s.review(b2, 1, moderation_status="pending")

    db.commit()
    return {
        "admin": admin,
        "customer": customer,
        "other_customer": other_customer,
        "vendor": vendor,
        "new_vendor": new_vendor,
        "services": {"haircut": haircut, "coloring": coloring, "unbooked": unbooked, "cleaning": cleaning},
        "bookings": [b1, b2, b3, b4, b5, b6, b7],
    }
