"""Customer risk assessment - normalized risk/readiness factors per debt record"""

from datetime import datetime

from collection_desk.domain.models import CustomerAssessment, DebtRecord
from collection_desk.utils.date_utils import age_in_days

# Saturation points
DEBT_AGE_HORIZON_DAYS = 180
AMOUNT_CEILING = 500_000
RESPONSIVENESS_DECAY_DAYS = 60
DEFAULT_RESPONSIVENESS = 0.5

AGE_BUCKETS = ((30, "0-30"), (60, "31-60"), (90, "61-90"))
OLDEST_BUCKET = "90+"


def debt_age_bucket(age_days: int) -> str:
    """Aging bucket label for a debt age in days"""
    for upper_bound, label in AGE_BUCKETS:
        if age_days <= upper_bound:
            return label
    return OLDEST_BUCKET


def assess_customer(record: DebtRecord, now: datetime) -> CustomerAssessment:
    """
    Compute the risk profile of one debt record.

    Factors (each nominally 0-1):
    - debt_age_score: days past due / 180, capped at 1. Not floored, so a
      debt that is not yet due scores below 0.
    - amount_score: remaining debt / 500,000, capped at 1
    - payment_history_score: paid / debt amount (0 when debt amount is 0).
      Not capped, so overpayment scores above 1.
    - contact_responsiveness_score: decays to 0 over 60 days since the last
      payment; 0.5 when no payment was ever recorded

    overall_risk_score weights: 40% age, 30% amount, 20% unpaid ratio,
    10% unresponsiveness.
    """
    debt_age_score = min(1.0, age_in_days(record.due_date, now) / DEBT_AGE_HORIZON_DAYS)
    amount_score = min(1.0, record.remaining_debt / AMOUNT_CEILING)
    payment_history_score = record.paid_amount / record.debt_amount if record.debt_amount > 0 else 0.0

    contact_responsiveness_score = DEFAULT_RESPONSIVENESS
    if record.last_payment_date:
        days_since_payment = age_in_days(record.last_payment_date, now)
        contact_responsiveness_score = max(0.0, 1 - days_since_payment / RESPONSIVENESS_DECAY_DAYS)

    overall_risk_score = (
        0.4 * debt_age_score
        + 0.3 * amount_score
        + 0.2 * (1 - payment_history_score)
        + 0.1 * (1 - contact_responsiveness_score)
    )

    return CustomerAssessment(
        debt_age_score=debt_age_score,
        amount_score=amount_score,
        payment_history_score=payment_history_score,
        contact_responsiveness_score=contact_responsiveness_score,
        overall_risk_score=overall_risk_score,
    )
