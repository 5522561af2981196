# backend/settlement.py
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round_cents(value):
    """Round to two decimals, halves away from zero."""
    rounded = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    # -0.00 -> 0.00
    return rounded if rounded else ZERO


class Expense:
    def __init__(self, payer, amount, involved, description="", created_at=None, id=None):
        self.payer = payer
        self.amount = Decimal(str(amount))
        # (name, weight) pairs, see participants.parse_participants
        self.involved = list(involved)
        self.description = description
        self.created_at = created_at
        self.id = id

    def __repr__(self):
        return f"Expense(payer={self.payer!r}, amount={self.amount}, involved={self.involved!r})"


@dataclass(frozen=True)
class Transfer:
    debtor: str
    creditor: str
    amount: Decimal

    def to_dict(self):
        return {"from": self.debtor, "to": self.creditor, "amount": float(self.amount)}


@dataclass
class Settlement:
    balances: dict = field(default_factory=dict)
    transfers: list = field(default_factory=list)

    def to_dict(self):
        return {
            "balances": {name: float(amount) for name, amount in self.balances.items()},
            "transfers": [t.to_dict() for t in self.transfers],
        }


def compute_balances(expenses):
    """
    Net balance per person, rounded to cents.

    Names appear in first-seen order: expenses in the order given, and
    within an expense its participants followed by the payer. Matching in
    match_transfers relies on this order.
    """
    balances = {}

    for expense in expenses:
        involved = [(name.strip(), Decimal(str(weight))) for name, weight in expense.involved]
        involved = [(name, weight) for name, weight in involved if name]
        payer = expense.payer.strip()
        if not involved or not payer:
            continue

        total_weight = sum(weight for _, weight in involved) or Decimal(1)
        per_unit = expense.amount / total_weight

        for name, weight in involved:
            balances[name] = balances.get(name, ZERO) - weight * per_unit

        balances[payer] = balances.get(payer, ZERO) + expense.amount

    return {name: round_cents(amount) for name, amount in balances.items()}


def match_transfers(balances):
    """Greedy two-pointer matching of debtors against creditors."""
    balances = {name: round_cents(amount) for name, amount in balances.items()}
    debtors = [[name, -amount] for name, amount in balances.items() if amount < 0]
    creditors = [[name, amount] for name, amount in balances.items() if amount > 0]

    transfers = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = round_cents(min(debtor[1], creditor[1]))
        if amount > 0:
            transfers.append(Transfer(debtor[0], creditor[0], amount))

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] == 0: i += 1
        if creditor[1] == 0: j += 1

    return transfers


def compute_settlement(expenses):
    balances = compute_balances(expenses)
    return Settlement(balances=balances, transfers=match_transfers(balances))
