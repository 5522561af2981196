from decimal import Decimal

import pytest
from pydantic import ValidationError

from schemas import CreateExpense, ExpenseIn


def payload(**overrides):
    data = {
        "payerName": "Alice",
        "amount": 30,
        "description": "Dinner",
        "participants": ["Alice", "Bob"],
    }
    data.update(overrides)
    return data


class TestCreateExpense:

    def test_valid_payload(self):
        expense = CreateExpense.model_validate(payload())
        assert expense.payer == "Alice"
        assert expense.amount == Decimal("30.00")
        assert expense.description == "Dinner"
        assert expense.participants == [("Alice", Decimal(1)), ("Bob", Decimal(1))]

    def test_participants_as_weighted_string(self):
        expense = CreateExpense.model_validate(payload(participants="Alice:1,Bob:2"))
        assert expense.participants == [("Alice", Decimal(1)), ("Bob", Decimal(2))]

    def test_amount_rounded_to_cents(self):
        assert CreateExpense.model_validate(payload(amount="12.345")).amount == Decimal("12.35")

    def test_whitespace_is_stripped(self):
        expense = CreateExpense.model_validate(payload(payerName="  Alice ", description=" Lunch "))
        assert expense.payer == "Alice"
        assert expense.description == "Lunch"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"payerName": ""},
            {"payerName": "   "},
            {"description": ""},
            {"amount": 0},
            {"amount": -5},
            {"amount": "0.004"},
            {"amount": "abc"},
            {"participants": []},
            {"participants": " , ,"},
            {"participants": 12},
            {"amount": "100000000.00"},
            {"participants": [{"name": "Smith, John", "weight": 1}, "A"]},
            {"participants": [{"name": "Bob:x", "weight": 3}]},
            {"participants": "A:1e999999,B:1e999999"},
            {"participants": "A:10001"},
        ],
    )
    def test_rejects_invalid(self, overrides):
        with pytest.raises(ValidationError):
            CreateExpense.model_validate(payload(**overrides))

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc:
            CreateExpense.model_validate({})
        assert exc.value.error_count() == 4
        assert {e["type"] for e in exc.value.errors()} == {"missing"}


class TestExpenseIn:

    def test_accepts_calculator_shape(self):
        item = ExpenseIn.model_validate({"payer": "Bob", "amount": 12.5, "involved": ["Bob", "Eve"]})
        expense = item.to_expense()
        assert expense.payer == "Bob"
        assert expense.amount == Decimal("12.50")
        assert expense.involved == [("Bob", Decimal(1)), ("Eve", Decimal(1))]

    def test_description_not_required(self):
        assert ExpenseIn.model_validate({"payer": "Bob", "amount": 1, "involved": "Bob"})


def test_bounds_are_inclusive():
    expense = CreateExpense.model_validate(payload(amount="99999999.99", participants="Alice:10000,Bob"))
    assert expense.amount == Decimal("99999999.99")
    assert expense.participants[0] == ("Alice", Decimal(10000))
