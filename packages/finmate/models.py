"""Data models and type aliases for ``finmate``.

Computation results (:class:`AllocationResult`, :class:`SuccessMetric`,
:class:`PortfolioMetrics`) are ephemeral and recomputed on every call. The
profile records (:class:`FixedExpense`, :class:`Goal`, :class:`Investment`,
:class:`UserProfile`) are owned by an external document store; this package
only reads totals and contribution numbers from them and never assumes
exclusive ownership.

All wire-facing models serialize with camelCase aliases (``monthlyNeeds``,
``dailyLimit``, ...) and accept either spelling on input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Roles and budget split
# ---------------------------------------------------------------------------


class Role(StrEnum):
    """Closed set of user roles. ``UNSET`` is the empty-string sentinel."""

    STUDENT = "Student"
    PROFESSIONAL = "Professional"
    HOUSEWIFE = "Housewife"
    UNSET = ""

    @classmethod
    def coerce(cls, value: Role | str | None) -> Role:
        """Map a role-like value to a :class:`Role`; unknown values become ``UNSET``."""

        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return cls.UNSET
        wanted = value.strip().lower()
        for role in cls:
            if role.value.lower() == wanted:
                return role
        return cls.UNSET


@dataclass(frozen=True, slots=True)
class BudgetSplit:
    """Needs/wants/savings fractions for one role; the three sum to 1.0."""

    needs_percent: float
    wants_percent: float
    savings_percent: float


class TargetForm(StrEnum):
    ONBOARDING = "onboarding"
    EXPENSE = "expense"


class AmountSource(StrEnum):
    """Provenance of the extracted ``amount`` field."""

    MODEL = "model"
    FALLBACK = "fallback"
    NONE = "none"


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AllocationResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    monthly_needs: float = 0.0
    monthly_wants: float = 0.0
    monthly_savings: float = 0.0
    daily_limit: float = 0.0


class SuccessMetric(CamelModel):
    """Role-specific score. ``success_rate`` is always within ``[0, 100]``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    metric_name: str
    metric_value: int
    metric_target: int
    success_rate: int = Field(ge=0, le=100)
    interpretation: str


type ExtractedFields = dict[str, Any]
"""Field name → value mapping produced by the extraction pipeline.

For the ``expense`` form the canonical keys are ``description``, ``amount``,
``category``, ``date``, ``categoryNormalized`` and ``_amountSource``.
"""


class ExtractionRequest(CamelModel):
    """Body of the parse-fields endpoint.

    ``text`` stays optional here so a missing value can be reported as a
    client error rather than a schema validation failure; non-string values
    count as missing. Unknown target forms fall back to ``onboarding``.
    """

    text: str | None = None
    target_form: TargetForm = TargetForm.ONBOARDING

    @field_validator("text", mode="before")
    @classmethod
    def _non_string_text_is_missing(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None

    @field_validator("target_form", mode="before")
    @classmethod
    def _default_unknown_form(cls, v: Any) -> Any:
        if isinstance(v, str) and v in {f.value for f in TargetForm}:
            return v
        return TargetForm.ONBOARDING


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of one extraction call.

    ``error``/``status``/``details`` are diagnostics attached only when every
    model attempt failed and the result was synthesized from the input text.
    """

    parsed: ExtractedFields
    raw: str
    model_response: Any = None
    error: str | None = None
    status: int | None = None
    details: Any = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.error is not None:
            payload["error"] = self.error
            if self.status is not None:
                payload["status"] = self.status
            payload["details"] = self.details
        payload["parsed"] = self.parsed
        payload["raw"] = self.raw
        payload["modelResponse"] = self.model_response
        return payload


# ---------------------------------------------------------------------------
# Profile records (persisted externally)
# ---------------------------------------------------------------------------


class FixedExpense(CamelModel):
    id: str | None = None
    name: str = ""
    amount: float = 0.0
    category: str = "Other"
    timeline_months: int | None = None
    start_date: str | None = None


class Contribution(CamelModel):
    amount: float
    date: str


class Goal(CamelModel):
    id: str | None = None
    name: str
    target_amount: float = 0.0
    current_amount: float = 0.0
    monthly_contribution: float = 0.0
    timeline_months: int | None = None
    start_date: str | None = None
    contributions: list[Contribution] = Field(default_factory=list)


class ExpenseRecord(CamelModel):
    """A logged expense as consumed by the suggestion prompt."""

    amount: float
    category: str
    date: str
    description: str | None = None


class Investment(CamelModel):
    id: str | None = None
    name: str = ""
    type: str | None = None
    purchase_amount: float = 0.0
    current_value: float = 0.0
    purchase_date: str | None = None


class EmergencyFundEntry(CamelModel):
    id: str
    amount: float
    date: str
    type: str = "deposit"
    notes: str | None = None


class EmergencyFund(CamelModel):
    target: float = 0.0
    current: float = 0.0
    history: list[EmergencyFundEntry] = Field(default_factory=list)


class UserProfile(CamelModel):
    """Profile document shape; budget figures mirror :func:`finmate.budget.allocate`."""

    name: str | None = None
    role: Role = Role.UNSET
    income: float = 0.0
    fixed_expenses: list[FixedExpense] = Field(default_factory=list)
    daily_spending_limit: float = 0.0
    monthly_needs: float = 0.0
    monthly_wants: float = 0.0
    monthly_savings: float = 0.0
    emergency_fund: EmergencyFund = Field(default_factory=EmergencyFund)


class PortfolioMetrics(CamelModel):
    total_invested: float = 0.0
    current_value: float = 0.0
    gain: float = 0.0
    gain_percent: float = 0.0


class SpendingSuggestion(BaseModel):
    suggestion: str
