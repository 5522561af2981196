# backend/store.py
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

from participants import format_participants, parse_participants
from settlement import Expense

db = SQLAlchemy()


def _now():
    return datetime.now(timezone.utc)


class ExpenseRow(db.Model):
    __tablename__ = "expenses"

    id = db.Column(db.Integer, primary_key=True)
    payer_name = db.Column(db.String(120), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    # "Alice,Bob:2" - see participants.format_participants
    participants = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    def participant_list(self):
        return parse_participants(self.participants)

    def to_expense(self):
        return Expense(
            self.payer_name,
            self.amount,
            self.participant_list(),
            description=self.description,
            created_at=self.created_at,
            id=self.id,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "payerName": self.payer_name,
            "amount": float(self.amount),
            "description": self.description,
            "participants": [
                {"name": name, "weight": float(weight)}
                for name, weight in self.participant_list()
            ],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class ExpenseStore:
    """Expense records kept in the configured SQL database."""

    def __init__(self, session=None):
        self.session = session or db.session

    def create(self, expense):
        row = ExpenseRow(
            payer_name=expense.payer,
            amount=expense.amount,
            description=expense.description,
            participants=format_participants(expense.participants),
        )
        self.session.add(row)
        self.session.commit()
        return row

    def list_all(self):
        """All records, newest first."""
        query = db.select(ExpenseRow).order_by(ExpenseRow.created_at.desc(), ExpenseRow.id.desc())
        return list(self.session.scalars(query))

    def get(self, expense_id):
        return self.session.get(ExpenseRow, expense_id)

    def delete(self, expense_id):
        row = self.get(expense_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.commit()
        return True

    def clear_all(self):
        result = self.session.execute(db.delete(ExpenseRow))
        self.session.commit()
        return result.rowcount
