"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from typing import Callable

from collection_desk.domain.models import DebtRecord, DebtStatus


# Wednesday morning, a business day
NOW = datetime(2024, 6, 12, 10, 0)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time so age-based scores are deterministic"""
    return NOW


@pytest.fixture
def make_record() -> Callable[..., DebtRecord]:
    """Factory for debt records with sensible defaults"""

    def _make(**overrides) -> DebtRecord:
        values = dict(
            customer_id="CUST_001",
            customer_name="ישראל ישראלי",
            id_number="123456789",
            debt_amount=50000,
            paid_amount=10000,
            remaining_debt=40000,
            due_date=NOW - timedelta(days=45),
            status=DebtStatus.ACTIVE,
            collection_agent="משה כהן",
            phone="050-1234567",
            notes="הערות בדיקה",
        )
        values.update(overrides)
        return DebtRecord(**values)

    return _make


@pytest.fixture
def sample_records(make_record) -> list[DebtRecord]:
    """Three customers with distinct names and agents"""
    return [
        make_record(),
        make_record(
            customer_id="CUST_002",
            customer_name="שרה לוי",
            id_number="987654321",
            collection_agent="רחל אברהם",
        ),
        make_record(
            customer_id="CUST_003",
            customer_name="דוד דוידסון",
            id_number="111111111",
            collection_agent="יוסי מרקוביץ",
        ),
    ]


@pytest.fixture
def overdue_large_debt(make_record) -> DebtRecord:
    """200 days overdue, 600,000 unpaid, no payment ever recorded"""
    return make_record(
        customer_id="CUST_BIG",
        debt_amount=600000,
        paid_amount=0,
        remaining_debt=600000,
        due_date=NOW - timedelta(days=200),
        last_payment_date=None,
    )
