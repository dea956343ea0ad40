"""
Display-Ready View Models

Everything the computation core hands back to the app.
All of them are freshly built on every call and never mutated afterwards,
so the host can memoize on input identity.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from splitty.models.ledger import SELF_ID, Category, Expense, Friend


# Share of the effective budget at which a category starts warning
WARNING_RATIO = Decimal("0.85")

ZERO = Decimal("0")


# =============================================================================
# BUDGET VIEWS
# =============================================================================

class PeriodSpend(BaseModel):
    """Personal spend for one calendar month."""
    model_config = ConfigDict(frozen=True)

    per_category: dict[str, Decimal] = Field(default_factory=dict)
    total: Decimal = ZERO
    matched_expenses: list[Expense] = Field(
        default_factory=list,
        description="Expenses that passed the month/category/settlement filter"
    )


class ShareLine(BaseModel):
    """One expense in a category drill-down, with the user's portion."""
    model_config = ConfigDict(frozen=True)

    expense: Expense
    my_share: Decimal

    @property
    def paid_by_user(self) -> bool:
        return self.expense.payer_id == SELF_ID


class CategoryRow(BaseModel):
    """
    One line of the monthly budget screen.

    `percentage` is clamped to [0, 100] for the progress bar;
    overspend is reported separately through `is_over`.
    """
    model_config = ConfigDict(frozen=True)

    category_id: str
    spent: Decimal = ZERO
    budget: Decimal = ZERO
    rollover: Decimal = ZERO
    effective_budget: Decimal = ZERO
    percentage: int = Field(default=0, ge=0, le=100)
    warning_ratio: Decimal = WARNING_RATIO

    @property
    def is_over(self) -> bool:
        return self.effective_budget > 0 and self.spent >= self.effective_budget

    @property
    def is_warning(self) -> bool:
        if self.effective_budget <= 0 or self.is_over:
            return False
        return self.spent >= self.warning_ratio * self.effective_budget

    @property
    def remaining(self) -> Decimal:
        return max(ZERO, self.effective_budget - self.spent)


class BudgetSummary(BaseModel):
    """Header figures of the monthly budget screen."""
    model_config = ConfigDict(frozen=True)

    total_budget: Decimal = ZERO
    total_spent: Decimal = ZERO
    remaining: Decimal = ZERO
    daily_average: Decimal = ZERO
    days_counted: int = Field(default=1, ge=1)

    @property
    def has_budget(self) -> bool:
        return self.total_budget > 0


class BudgetOverview(BaseModel):
    """Everything needed to render one month of budgets."""
    model_config = ConfigDict(frozen=True)

    month_key: str
    spend: PeriodSpend
    rollover: dict[str, Decimal] = Field(default_factory=dict)
    rows: list[CategoryRow] = Field(default_factory=list)
    summary: BudgetSummary


# =============================================================================
# BALANCE VIEWS
# =============================================================================

class BalanceDrift(BaseModel):
    """A cached friend balance that disagrees with the expense history."""
    model_config = ConfigDict(frozen=True)

    friend_id: str
    cached: Decimal
    recomputed: Decimal

    @property
    def difference(self) -> Decimal:
        return self.cached - self.recomputed


class SettlementSuggestion(BaseModel):
    """Pre-filled direction and amount for the settle-up form."""
    model_config = ConfigDict(frozen=True)

    payer_id: str
    receiver_id: str
    amount: Decimal = Field(..., ge=0)

    @property
    def user_pays(self) -> bool:
        return self.payer_id == SELF_ID


class SettlementOutcome(BaseModel):
    """Result of recording a manual settlement."""
    model_config = ConfigDict(frozen=True)

    expense: Expense
    friend: Friend


class SettlementGraph(BaseModel):
    """
    Two-layer debt flow around the user.

    `owed_to_user` sits above the user node, `user_owes` below it.
    Both layers are ordered by descending magnitude.
    """
    model_config = ConfigDict(frozen=True)

    owed_to_user: list[Friend] = Field(default_factory=list)
    user_owes: list[Friend] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.owed_to_user and not self.user_owes

    @property
    def max_magnitude(self) -> Decimal:
        magnitudes = [abs(f.balance) for f in self.owed_to_user + self.user_owes]
        return max(magnitudes + [Decimal("1")])

    def edge_weight(self, friend: Friend) -> Decimal:
        """Stroke width of a friend's edge, between 2 and 8."""
        scaled = abs(friend.balance) / self.max_magnitude * 8
        return max(Decimal("2"), scaled)


# =============================================================================
# ACTIVITY VIEWS
# =============================================================================

class ActivityQuery(BaseModel):
    """Filters of the activity feed."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    search: str = ""
    tag: Optional[str] = None


class ActivityItem(BaseModel):
    """An expense enriched with the names the feed displays."""
    model_config = ConfigDict(frozen=True)

    expense: Expense
    category: Category
    payer_name: str
    group_name: Optional[str] = None

    @property
    def day(self) -> date:
        return self.expense.date.date()
