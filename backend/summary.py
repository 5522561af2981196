# backend/summary.py
import re
from decimal import Decimal

from settlement import ZERO, round_cents

GROUP_TAG = re.compile(r"\[group:([^\]]+)\]", re.IGNORECASE)


def group_tag(description):
    """'Dinner [group:Trip]' -> 'Trip'"""
    if not description:
        return None
    m = GROUP_TAG.search(description)
    return m.group(1).strip() if m else None


def filter_by_group(expenses, group):
    if not group:
        return list(expenses)
    return [e for e in expenses if group_tag(e.description) == group]


def summarize(expenses):
    total = ZERO
    people = []
    groups = []

    for expense in expenses:
        total += Decimal(expense.amount)
        for name, _ in expense.involved:
            if name not in people:
                people.append(name)
        tag = group_tag(expense.description)
        if tag and tag not in groups:
            groups.append(tag)

    average = total / len(people) if people else ZERO
    return {
        "total": float(round_cents(total)),
        "peopleCount": len(people),
        "average": float(round_cents(average)),
        "groups": groups,
    }
