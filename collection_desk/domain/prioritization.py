"""Action prioritization - 0-10 priority score for a collection action on one debt"""

from datetime import datetime
from typing import Callable, Dict, Tuple

from collection_desk.domain.assessment import debt_age_bucket
from collection_desk.domain.models import CollectionAction, CustomerAssessment, DebtRecord, DebtStatus
from collection_desk.domain.options import RecommendationWeights
from collection_desk.utils.date_utils import age_in_days

MAX_PRIORITY = 10.0

# Call: base score per debt aging bucket
CALL_BASE_BY_AGE: Dict[str, float] = {"0-30": 0.8, "31-60": 0.9, "61-90": 0.7, "90+": 0.5}

# Email: (remaining debt strictly below, base score)
EMAIL_BASE_BY_AMOUNT: Tuple[Tuple[float, float], ...] = ((10_000, 0.7), (50_000, 0.5))
EMAIL_BASE_LARGER = 0.3

STATUS_MULTIPLIER: Dict[DebtStatus, float] = {
    DebtStatus.ACTIVE: 1.0,
    DebtStatus.IN_PROCESS: 0.8,
    DebtStatus.SUSPENDED: 1.2,
    DebtStatus.CLOSED: 0.1,
}


def _call_base(record: DebtRecord, assessment: CustomerAssessment, age_days: int) -> float:
    base = CALL_BASE_BY_AGE[debt_age_bucket(age_days)]
    if assessment.contact_responsiveness_score > 0.7:
        base *= 1.2
    return base


def _email_base(record: DebtRecord, assessment: CustomerAssessment, age_days: int) -> float:
    base = next(
        (score for limit, score in EMAIL_BASE_BY_AMOUNT if record.remaining_debt < limit),
        EMAIL_BASE_LARGER,
    )
    # Unresponsive customers ignore email
    if assessment.contact_responsiveness_score < 0.3:
        base *= 0.5
    return base


def _meeting_base(record: DebtRecord, assessment: CustomerAssessment, age_days: int) -> float:
    if record.remaining_debt > 50_000 and assessment.payment_history_score > 0.3:
        base = 0.85
    elif record.remaining_debt > 20_000:
        base = 0.6
    else:
        base = 0.3
    if age_days > 120:
        base *= 0.7
    return base


def _legal_base(record: DebtRecord, assessment: CustomerAssessment, age_days: int) -> float:
    if age_days > 90 or record.remaining_debt > 100_000:
        base = 0.8
    elif age_days > 60:
        base = 0.6
    else:
        base = 0.2
    if assessment.contact_responsiveness_score < 0.3:
        base *= 1.3
    return base


BaseScoreRule = Callable[[DebtRecord, CustomerAssessment, int], float]

BASE_SCORE_RULES: Dict[CollectionAction, BaseScoreRule] = {
    CollectionAction.CALL: _call_base,
    CollectionAction.EMAIL: _email_base,
    CollectionAction.MEETING: _meeting_base,
    CollectionAction.LEGAL: _legal_base,
}


def base_score(
    record: DebtRecord,
    action: CollectionAction,
    assessment: CustomerAssessment,
    age_days: int,
) -> float:
    """Hand-tuned suitability of an action for this debt, before weighting"""
    return BASE_SCORE_RULES[CollectionAction(action)](record, assessment, age_days)


def calculate_action_priority(
    record: DebtRecord,
    action: CollectionAction,
    assessment: CustomerAssessment,
    now: datetime,
    weights: RecommendationWeights | dict | None = None,
) -> float:
    """
    Priority up to 10 (higher = more urgent/valuable).

    Not floored at 0: a debt that is not yet due, or one paid above its
    amount, carries negative age or unpaid-ratio factors and can score below 0.

    priority = min(10, base * weighted_factors * status_multiplier * 10)

    weighted_factors combines age, amount, unpaid ratio, unresponsiveness and
    overall risk with the given weights. Status multiplier: active 1.0,
    in-process 0.8, suspended 1.2, closed 0.1 (unknown status 1.0).
    """
    w = RecommendationWeights.coerce(weights)
    base = base_score(record, action, assessment, age_in_days(record.due_date, now))

    weighted = base * (
        assessment.debt_age_score * w.debt_age_weight
        + assessment.amount_score * w.amount_weight
        + (1 - assessment.payment_history_score) * w.payment_history_weight
        + (1 - assessment.contact_responsiveness_score) * w.contact_history_weight
        + assessment.overall_risk_score * w.success_rate_weight
    )
    status_multiplier = STATUS_MULTIPLIER.get(record.status, 1.0)

    return min(MAX_PRIORITY, weighted * status_multiplier * 10)
