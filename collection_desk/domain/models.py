"""Domain models - pure Python dataclasses representing debt records and engine outputs"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class DebtStatus(str, Enum):
    """Debt status as stored by the host application"""

    ACTIVE = "פעיל"
    CLOSED = "סגור"
    IN_PROCESS = "בטיפול"
    SUSPENDED = "מושהה"


class CollectionAction(str, Enum):
    """Collection action an agent can take"""

    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    LEGAL = "legal"


# Evaluation order for per-customer recommendations
ALL_ACTIONS: Tuple[CollectionAction, ...] = (
    CollectionAction.CALL,
    CollectionAction.EMAIL,
    CollectionAction.MEETING,
    CollectionAction.LEGAL,
)


@dataclass
class DebtRecord:
    """Debt record supplied by the host application (read-only for the engines)"""

    customer_id: str
    customer_name: str
    id_number: str
    debt_amount: float
    paid_amount: float
    remaining_debt: float
    due_date: datetime
    status: DebtStatus
    collection_agent: str
    last_payment_date: Optional[datetime] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SearchResult:
    """One matched record with its score and highlighted fields"""

    record: DebtRecord
    score: float
    matched_fields: Tuple[str, ...]
    highlights: Mapping[str, str]


@dataclass(frozen=True)
class SearchSummary:
    """Aggregate statistics over a search result list"""

    total_results: int
    avg_score: float
    top_matched_fields: Tuple[str, ...]
    search_time_ms: float


@dataclass(frozen=True)
class CustomerAssessment:
    """Normalized risk/readiness factors for one debt record"""

    debt_age_score: float
    amount_score: float
    payment_history_score: float
    contact_responsiveness_score: float
    overall_risk_score: float


@dataclass(frozen=True)
class Recommendation:
    """Recommended collection action for a customer"""

    customer_id: str
    action: CollectionAction
    priority: float  # 0-10
    reason: str
    estimated_success: float  # percentage, 5-100


@dataclass(frozen=True)
class AgentSummary:
    """Recommendations grouped under one collection agent"""

    agent: str
    recommendations: Tuple[Recommendation, ...]
    total_debt: float


AgentSummaries = Dict[str, AgentSummary]
