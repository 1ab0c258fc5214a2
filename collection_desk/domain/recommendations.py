"""Recommendation engine - ranks collection actions across debtors"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from collection_desk.config import settings
from collection_desk.domain.assessment import assess_customer
from collection_desk.domain.models import (
    ALL_ACTIONS,
    AgentSummaries,
    AgentSummary,
    CollectionAction,
    CustomerAssessment,
    DebtRecord,
    DebtStatus,
    Recommendation,
)
from collection_desk.domain.options import RecommendationWeights
from collection_desk.domain.prioritization import calculate_action_priority
from collection_desk.utils.date_utils import age_in_days, is_business_day as default_business_day

logger = logging.getLogger(__name__)

# Historical success rate per action and debt status
SUCCESS_RATES: Dict[CollectionAction, Dict[DebtStatus, float]] = {
    CollectionAction.CALL: {
        DebtStatus.ACTIVE: 0.65,
        DebtStatus.IN_PROCESS: 0.45,
        DebtStatus.SUSPENDED: 0.25,
        DebtStatus.CLOSED: 0.10,
    },
    CollectionAction.EMAIL: {
        DebtStatus.ACTIVE: 0.35,
        DebtStatus.IN_PROCESS: 0.25,
        DebtStatus.SUSPENDED: 0.15,
        DebtStatus.CLOSED: 0.05,
    },
    CollectionAction.MEETING: {
        DebtStatus.ACTIVE: 0.75,
        DebtStatus.IN_PROCESS: 0.60,
        DebtStatus.SUSPENDED: 0.30,
        DebtStatus.CLOSED: 0.05,
    },
    CollectionAction.LEGAL: {
        DebtStatus.ACTIVE: 0.80,
        DebtStatus.IN_PROCESS: 0.70,
        DebtStatus.SUSPENDED: 0.85,
        DebtStatus.CLOSED: 0.20,
    },
}
DEFAULT_SUCCESS_RATE = 0.3
MIN_SUCCESS_PCT = 5.0
MAX_SUCCESS_PCT = 100.0

# Statuses considered by bulk recommendations
ACTIONABLE_STATUSES = frozenset({DebtStatus.ACTIVE, DebtStatus.IN_PROCESS})

# Actions that need no live contact with the customer
OFF_HOURS_ACTIONS = frozenset({CollectionAction.EMAIL, CollectionAction.LEGAL})

REASON_SEPARATOR = " • "
FALLBACK_REASON = "המלצה מבוססת אלגוריתם"


@dataclass(frozen=True)
class _Facts:
    age_days: int
    amount: float
    assessment: CustomerAssessment


ReasonRule = Tuple[Callable[[_Facts], bool], str]

ACTION_REASONS: Dict[CollectionAction, Tuple[ReasonRule, ...]] = {
    CollectionAction.CALL: (
        (lambda f: f.age_days <= 30, "חוב חדש - מתאים לקשר טלפוני"),
        (lambda f: f.assessment.contact_responsiveness_score > 0.7, "לקוח מגיב טוב לפניות"),
        (lambda f: 10_000 <= f.amount <= 50_000, "סכום מתאים לטיפול טלפוני"),
    ),
    CollectionAction.EMAIL: (
        (lambda f: f.amount < 10_000, "סכום קטן - מתאים לתזכורת באימייל"),
        (lambda f: f.age_days <= 45, "חוב עדיין חדש - אימייל יכול להזכיר"),
    ),
    CollectionAction.MEETING: (
        (lambda f: f.amount > 50_000, "סכום גדול - מצדיק פגישה אישית"),
        (lambda f: f.assessment.payment_history_score > 0.3, "היסטוריית תשלומים חיובית"),
        (lambda f: f.age_days <= 90, "עדיין בטווח זמן לפתרון ידידותי"),
    ),
    CollectionAction.LEGAL: (
        (lambda f: f.age_days > 90, "חוב ישן - דורש טיפול משפטי"),
        (lambda f: f.amount > 100_000, "סכום משמעותי - מצדיק הליך משפטי"),
        (lambda f: f.assessment.contact_responsiveness_score < 0.3, "לקוח לא מגיב - זקוק ללחץ משפטי"),
    ),
}

# Appended after the action-specific reasons
GENERAL_REASONS: Tuple[ReasonRule, ...] = (
    (lambda f: f.assessment.overall_risk_score > 0.7, "לקוח בסיכון גבוה לאי תשלום"),
    (lambda f: f.assessment.debt_age_score > 0.5, "החוב מתיישן - דורש טיפול דחוף"),
)


def generate_reason(
    record: DebtRecord,
    action: CollectionAction,
    assessment: CustomerAssessment,
    now: datetime,
) -> str:
    """Human-readable explanation: action-specific factors first, then general ones"""
    facts = _Facts(
        age_days=age_in_days(record.due_date, now),
        amount=record.remaining_debt,
        assessment=assessment,
    )
    rules = ACTION_REASONS[CollectionAction(action)] + GENERAL_REASONS
    reasons = [text for applies, text in rules if applies(facts)]
    return REASON_SEPARATOR.join(reasons) or FALLBACK_REASON


def calculate_estimated_success(
    record: DebtRecord,
    action: CollectionAction,
    assessment: CustomerAssessment,
    now: datetime,
) -> float:
    """
    Estimated success percentage, clamped to [5, 100].

    Starts from the historical rate for (action, status) and adjusts for
    responsiveness (x1.3 / x0.7), payment history (x1.2 / x0.8) and debt age
    (x0.8 past 120 days / x1.1 under 30 days).
    """
    rate = SUCCESS_RATES[CollectionAction(action)].get(record.status, DEFAULT_SUCCESS_RATE)

    if assessment.contact_responsiveness_score > 0.7:
        rate *= 1.3
    elif assessment.contact_responsiveness_score < 0.3:
        rate *= 0.7

    if assessment.payment_history_score > 0.5:
        rate *= 1.2
    elif assessment.payment_history_score < 0.2:
        rate *= 0.8

    debt_age = age_in_days(record.due_date, now)
    if debt_age > 120:
        rate *= 0.8
    elif debt_age < 30:
        rate *= 1.1

    return min(MAX_SUCCESS_PCT, max(MIN_SUCCESS_PCT, rate * 100))


def _by_priority(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    # Stable: equal priorities keep evaluation order
    return sorted(recommendations, key=lambda r: r.priority, reverse=True)


def recommend_for_customer(
    record: DebtRecord,
    now: datetime,
    weights: RecommendationWeights | dict | None = None,
    min_priority: Optional[float] = None,
) -> List[Recommendation]:
    """
    Score all four actions for one record (any status).

    Only actions with priority >= min_priority (default 3) are returned,
    highest priority first.
    """
    w = RecommendationWeights.coerce(weights)
    threshold = settings.recommendation_min_priority if min_priority is None else min_priority
    assessment = assess_customer(record, now)

    candidates = []
    for action in ALL_ACTIONS:
        priority = calculate_action_priority(record, action, assessment, now, w)
        if priority < threshold:
            continue
        candidates.append(
            Recommendation(
                customer_id=record.customer_id,
                action=action,
                priority=priority,
                reason=generate_reason(record, action, assessment, now),
                estimated_success=calculate_estimated_success(record, action, assessment, now),
            )
        )

    return _by_priority(candidates)


def recommend_bulk(
    records: Sequence[DebtRecord],
    now: datetime,
    max_recommendations: Optional[int] = None,
    weights: RecommendationWeights | dict | None = None,
) -> List[Recommendation]:
    """
    Recommendations across all active and in-process records.

    Closed and suspended debts are skipped. A record whose scoring fails is
    logged and skipped without aborting the batch.
    """
    w = RecommendationWeights.coerce(weights)
    limit = settings.recommendation_max_results if max_recommendations is None else max_recommendations

    collected: List[Recommendation] = []
    for record in records:
        try:
            if record.status not in ACTIONABLE_STATUSES:
                continue
            collected.extend(recommend_for_customer(record, now, w))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(
                f"Skipping record during recommendation: {e}",
                extra={"customer_id": getattr(record, "customer_id", None), "step": "recommend"},
            )

    return _by_priority(collected)[:limit]


def summarize_by_agent(
    records: Sequence[DebtRecord],
    recommendations: Sequence[Recommendation],
) -> AgentSummaries:
    """
    Group recommendations by the agent assigned to each customer.

    total_debt adds the customer's remaining debt once per recommendation,
    so a customer with several recommended actions is counted several times.
    Recommendations for unknown customers are dropped.
    """
    by_customer: Dict[str, DebtRecord] = {}
    for record in records:
        by_customer.setdefault(record.customer_id, record)

    grouped: Dict[str, List[Tuple[Recommendation, DebtRecord]]] = {}
    for recommendation in recommendations:
        record = by_customer.get(recommendation.customer_id)
        if record is None:
            continue
        grouped.setdefault(record.collection_agent, []).append((recommendation, record))

    return {
        agent: AgentSummary(
            agent=agent,
            recommendations=tuple(rec for rec, _ in pairs),
            total_debt=sum(record.remaining_debt for _, record in pairs),
        )
        for agent, pairs in grouped.items()
    }


def filter_time_appropriate(
    recommendations: Sequence[Recommendation],
    now: datetime,
    is_business_day: Optional[Callable[[datetime], bool]] = None,
) -> Sequence[Recommendation]:
    """Outside business time keep only actions that need no live contact (email, legal)"""
    predicate = is_business_day or default_business_day
    if predicate(now):
        return recommendations
    return [rec for rec in recommendations if rec.action in OFF_HOURS_ACTIONS]


def filter_recommendations(
    recommendations: Sequence[Recommendation],
    records: Sequence[DebtRecord],
    agent: Optional[str] = None,
    action: Optional[CollectionAction] = None,
    min_priority: float = 0.0,
) -> List[Recommendation]:
    """Dashboard filters: assigned agent, action kind and minimum priority"""
    agent_of: Dict[str, str] = {}
    for record in records:
        agent_of.setdefault(record.customer_id, record.collection_agent)

    return [
        rec
        for rec in recommendations
        if (not agent or agent_of.get(rec.customer_id) == agent)
        and (not action or rec.action == action)
        and rec.priority >= min_priority
    ]


def available_agents(records: Sequence[DebtRecord]) -> List[str]:
    """Distinct non-blank agents, in first-seen order"""
    agents: Dict[str, None] = {}
    for record in records:
        if record.collection_agent and record.collection_agent.strip():
            agents.setdefault(record.collection_agent, None)
    return list(agents)
