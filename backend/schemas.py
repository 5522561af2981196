"""
Request models for the expenses API.

Everything that reaches the settlement engine goes through these first:
payer and description are non-empty, the amount is positive at cent
precision and the participant list parses to at least one entry.
"""

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from participants import parse_participants
from settlement import Expense, round_cents

# Numeric(10, 2) column
MAX_AMOUNT = Decimal("99999999.99")
MAX_WEIGHT = Decimal(10000)
# Separators of the stored "name:weight,name" form
RESERVED = (",", ":")


class ExpenseIn(BaseModel):
    """An expense as posted by a client (no description needed)."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    payer: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("payerName", "payer"),
    )
    amount: Decimal = Field(..., description="Positive amount, rounded to cents")
    participants: list[tuple[str, Decimal]] = Field(
        ...,
        validation_alias=AliasChoices("participants", "involved"),
    )

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount must be a finite number")
        v = round_cents(v)
        if v <= 0:
            raise ValueError("amount must be positive")
        if v > MAX_AMOUNT:
            raise ValueError(f"amount must not exceed {MAX_AMOUNT}")
        return v

    @field_validator("participants", mode="before")
    @classmethod
    def parse_encoded_participants(cls, v: Any) -> list:
        try:
            parsed = parse_participants(v)
        except TypeError as e:
            raise ValueError(str(e)) from e
        if not parsed:
            raise ValueError("at least one participant is required")
        for name, weight in parsed:
            if any(c in name for c in RESERVED):
                raise ValueError(f"participant name {name!r} must not contain ',' or ':'")
            if weight > MAX_WEIGHT:
                raise ValueError(f"participant weight must not exceed {MAX_WEIGHT}")
        return parsed

    def to_expense(self) -> Expense:
        return Expense(self.payer, self.amount, self.participants)


class CreateExpense(ExpenseIn):
    """Payload of POST /api/expenses."""

    description: str = Field(..., min_length=1)
