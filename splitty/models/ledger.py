"""
Core Ledger Models for Splitty

These models describe the collections the computation core reads:
expenses, monthly budgets, categories, friends and groups.
They are designed to:
1. Accept records exactly as the app store keeps them (camelCase keys)
2. Degrade missing optional fields to safe defaults
3. Stay immutable so computations can never modify their inputs

DESIGN DECISION: The split policy is a tagged variant.
`splitDetails` only exists on the unequal case, so no code path can read
per-person amounts off an equal split by accident.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# Participant id that always refers to the app user
SELF_ID = "self"

# Reserved default category; cannot be deleted
GENERAL_CATEGORY_ID = "general"


# =============================================================================
# SPLIT POLICY - discriminated on split_type
# =============================================================================

class EqualSplit(BaseModel):
    """Every sharer, payer included, owes the same portion."""
    model_config = ConfigDict(frozen=True)

    split_type: Literal["equal"] = "equal"


class UnequalSplit(BaseModel):
    """
    Explicit per-participant amounts.

    The user's own portion lives under the `self` key.
    A missing `self` entry means the user owes nothing.
    """
    model_config = ConfigDict(frozen=True)

    split_type: Literal["unequal"] = "unequal"
    details: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Participant id -> monetary share"
    )

    @field_validator("details", mode="before")
    @classmethod
    def none_means_empty(cls, v: Any) -> Any:
        return v or {}


SplitPolicy = Annotated[
    Union[EqualSplit, UnequalSplit],
    Field(discriminator="split_type"),
]


def _pop_first(data: dict, *keys: str) -> Any:
    """Pop every key and return the first non-None value found."""
    found = None
    for key in keys:
        value = data.pop(key, None)
        if found is None and value is not None:
            found = value
    return found


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(BaseModel):
    """
    A shared expense or a settlement transfer.

    For settlements, `split_with[0]` is the party that received the money.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique expense id"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Full amount of the bill"
    )
    date: datetime = Field(
        ...,
        description="When the expense happened"
    )
    category: str = Field(
        default=GENERAL_CATEGORY_ID,
        description="Category id"
    )
    payer_id: str = Field(
        default=SELF_ID,
        description="'self' or a friend id"
    )
    split: SplitPolicy = Field(default_factory=EqualSplit)
    split_with: list[str] = Field(
        default_factory=list,
        description="Participants other than the payer"
    )
    is_settlement: bool = False
    tags: list[str] = Field(default_factory=list)
    group_id: Optional[str] = None
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def fold_store_fields(cls, data: Any) -> Any:
        """
        Fold the store's flat splitType/splitDetails pair into `split`,
        and drop explicit nulls so field defaults apply.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        split_type = _pop_first(data, "splitType", "split_type")
        split_details = _pop_first(data, "splitDetails", "split_details")

        if data.get("split") is None:
            if split_type == "unequal":
                data["split"] = {
                    "split_type": "unequal",
                    "details": split_details or {},
                }
            else:
                data["split"] = {"split_type": "equal"}

        for key in (
            "category", "description", "tags",
            "splitWith", "split_with", "isSettlement", "is_settlement",
        ):
            if key in data and data[key] is None:
                del data[key]

        return data

    @property
    def split_type(self) -> str:
        return self.split.split_type

    @property
    def receiver_id(self) -> Optional[str]:
        """Receiving party of a settlement."""
        return self.split_with[0] if self.split_with else None


# =============================================================================
# BUDGETS, CATEGORIES, PEOPLE
# =============================================================================

class Budget(BaseModel):
    """Per-category spending limits for one calendar month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        ...,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Month key, YYYY-MM"
    )
    categories: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Category id -> monthly limit"
    )

    @field_validator("categories")
    @classmethod
    def limits_not_negative(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        for category_id, limit in v.items():
            if limit < 0:
                raise ValueError(
                    f"Budget for '{category_id}' cannot be negative"
                )
        return v


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=60)
    color: str = "#6B7280"
    icon: str = "Tag"


class Friend(BaseModel):
    """
    A counterparty of the user.

    `balance` > 0: the friend owes the user.
    `balance` < 0: the user owes the friend.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str
    balance: Decimal = Decimal("0")
    linked_user_id: Optional[str] = None


class Group(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    members: list[str] = Field(default_factory=list)

    def includes(self, friend: Friend) -> bool:
        """A friend belongs to the group directly or through a linked account."""
        if friend.id in self.members:
            return True
        return bool(friend.linked_user_id) and friend.linked_user_id in self.members
