"""Public interface for the ``finmate`` package.

Only symbol re-exports live here; there is no runtime logic and no import-time
side effects (no environment reads, no handler attachment).
"""

from .budget import ROLE_BUDGET_SPLITS, allocate, get_role_budget_split
from .categories import ALLOWED_CATEGORIES, normalize_category, role_expense_categories
from .errors import ClientError, ConfigurationError, UpstreamError
from .extraction import extract_fields
from .metrics import evaluate
from .models import (
    AllocationResult,
    AmountSource,
    BudgetSplit,
    ExtractedFields,
    ExtractionResult,
    FixedExpense,
    Goal,
    Investment,
    PortfolioMetrics,
    Role,
    SpendingSuggestion,
    SuccessMetric,
    TargetForm,
    UserProfile,
)
from .portfolio import portfolio_metrics
from .profile import build_profile, fixed_expenses_total, role_goal_templates
from .suggestions import get_spending_suggestion

__all__ = [
    # Allocation / metrics
    "ROLE_BUDGET_SPLITS",
    "allocate",
    "get_role_budget_split",
    "evaluate",
    # Extraction
    "extract_fields",
    "ALLOWED_CATEGORIES",
    "normalize_category",
    "role_expense_categories",
    # Profile / portfolio / suggestions
    "build_profile",
    "fixed_expenses_total",
    "role_goal_templates",
    "portfolio_metrics",
    "get_spending_suggestion",
    # Errors
    "ClientError",
    "ConfigurationError",
    "UpstreamError",
    # Models / types
    "AllocationResult",
    "AmountSource",
    "BudgetSplit",
    "ExtractedFields",
    "ExtractionResult",
    "FixedExpense",
    "Goal",
    "Investment",
    "PortfolioMetrics",
    "Role",
    "SpendingSuggestion",
    "SuccessMetric",
    "TargetForm",
    "UserProfile",
]
