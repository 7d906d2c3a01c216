"""
Shared fixtures: an in-memory SQLite store, a session per test, seed
helpers and a fixed clock.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from school_billing.config.settings import Settings
from school_billing.db.init_db import drop_db, init_db
from school_billing.models import (
    DiscountCode,
    DiscountCodeUsage,
    Enrollment,
    Family,
    IndividualSessionPurchase,
    Payment,
    Program,
    Student,
)
from school_billing.schemas.common.enums import (
    DiscountScope,
    DiscountType,
    EnrollmentStatus,
    PaymentStatus,
    PaymentType,
    UsageType,
)
from school_billing.services import build_payment_services

NOW = datetime(2025, 6, 15, 12, 0, 0)
TODAY = date(2025, 6, 15)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        TIMEZONE="UTC",
        CURRENCY="USD",
        DATABASE_URL="sqlite://",
        ELIGIBILITY_WINDOW_DAYS=35,
        DUPLICATE_PAYMENT_WINDOW_MINUTES=60,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    drop_db(bind=engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def services(session, test_settings):
    return build_payment_services(session, test_settings)


class Seeder:
    """Writes rows with explicit timestamps so ordering is deterministic."""

    def __init__(self, session):
        self.session = session
        self._tick = 0

    def _stamp(self) -> datetime:
        # Strictly increasing creation times, all before NOW
        self._tick += 1
        return NOW - timedelta(days=400) + timedelta(seconds=self._tick)

    def _add(self, obj):
        self.session.add(obj)
        self.session.flush()
        return obj

    def family(self, name: str = "Nguyen") -> Family:
        return self._add(Family(name=name, created_at=self._stamp()))

    def student(self, family: Family, first_name: str, last_name: Optional[str] = None) -> Student:
        return self._add(
            Student(
                family_id=family.id,
                first_name=first_name,
                last_name=last_name or family.name,
                created_at=self._stamp(),
            )
        )

    def program(
        self,
        name: str = "Junior Karate",
        monthly: Optional[int] = None,
        yearly: Optional[int] = None,
        individual: Optional[int] = None,
    ) -> Program:
        return self._add(
            Program(
                name=name,
                monthly_fee_cents=monthly,
                yearly_fee_cents=yearly,
                individual_session_fee_cents=individual,
                created_at=self._stamp(),
            )
        )

    def enroll(
        self,
        student: Student,
        program: Program,
        status: EnrollmentStatus = EnrollmentStatus.ACTIVE,
    ) -> Enrollment:
        return self._add(
            Enrollment(
                student_id=student.id,
                program_id=program.id,
                status=status,
                created_at=self._stamp(),
            )
        )

    def payment(
        self,
        family: Family,
        students: Iterable[Student] = (),
        *,
        type: PaymentType = PaymentType.MONTHLY_GROUP,
        status: PaymentStatus = PaymentStatus.SUCCEEDED,
        payment_date: Optional[date] = None,
        created_at: Optional[datetime] = None,
        subtotal_cents: int = 12000,
        discount_cents: Optional[int] = None,
    ) -> Payment:
        total = subtotal_cents - (discount_cents or 0)
        payment = Payment(
            family_id=family.id,
            type=type,
            status=status,
            subtotal_amount_cents=subtotal_cents,
            discount_amount_cents=discount_cents,
            total_amount_cents=total,
            payment_date=payment_date,
            created_at=created_at or self._stamp(),
        )
        payment.students = list(students)
        return self._add(payment)

    def discount_code(
        self,
        code: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        discount_type: DiscountType = DiscountType.PERCENTAGE,
        value: str = "10",
        usage_type: UsageType = UsageType.ONGOING,
        max_uses: Optional[int] = None,
        current_uses: int = 0,
        scope: DiscountScope = DiscountScope.PER_FAMILY,
        applicable_to: Iterable[PaymentType] = (PaymentType.MONTHLY_GROUP,),
        family: Optional[Family] = None,
        student: Optional[Student] = None,
        valid_from: Optional[datetime] = None,
        valid_until: Optional[datetime] = None,
        is_active: bool = True,
    ) -> DiscountCode:
        return self._add(
            DiscountCode(
                code=code,
                name=name or code.title(),
                description=description,
                discount_type=discount_type,
                discount_value=Decimal(value),
                usage_type=usage_type,
                max_uses=max_uses,
                current_uses=current_uses,
                scope=scope,
                applicable_to=[t.value for t in applicable_to],
                family_id=family.id if family else None,
                student_id=student.id if student else None,
                valid_from=valid_from,
                valid_until=valid_until,
                is_active=is_active,
                created_at=self._stamp(),
            )
        )

    def usage(
        self,
        code: DiscountCode,
        family: Family,
        student: Optional[Student] = None,
        discount_cents: int = 1000,
        original_cents: int = 10000,
    ) -> DiscountCodeUsage:
        return self._add(
            DiscountCodeUsage(
                discount_code_id=code.id,
                family_id=family.id,
                student_id=student.id if student else None,
                discount_amount_cents=discount_cents,
                original_amount_cents=original_cents,
                final_amount_cents=original_cents - discount_cents,
                used_at=NOW - timedelta(days=3),
                created_at=self._stamp(),
            )
        )

    def session_purchase(self, family: Family, purchased: int, remaining: int, purchase_date: date) -> IndividualSessionPurchase:
        return self._add(
            IndividualSessionPurchase(
                family_id=family.id,
                purchase_date=purchase_date,
                quantity_purchased=purchased,
                quantity_remaining=remaining,
                created_at=self._stamp(),
            )
        )


@pytest.fixture
def seed(session) -> Seeder:
    return Seeder(session)