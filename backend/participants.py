# backend/participants.py
from decimal import Decimal, InvalidOperation

ONE = Decimal(1)


def _weight(raw):
    # Missing, junk, non-finite or < 1 all count as a single share
    if raw is None or isinstance(raw, bool):
        return ONE
    try:
        weight = Decimal(str(raw).strip())
    except InvalidOperation:
        return ONE
    if not weight.is_finite() or weight < ONE:
        return ONE
    return weight


def _parse_entry(entry):
    if isinstance(entry, dict):
        return str(entry.get("name") or "").strip(), _weight(entry.get("weight"))
    if isinstance(entry, str):
        name, sep, raw_weight = entry.partition(":")
        return name.strip(), _weight(raw_weight if sep else None)
    raise TypeError(f"Unsupported participant entry: {entry!r}")


def parse_participants(value):
    """
    Turn any accepted participant encoding into (name, weight) pairs.

    Accepts a comma-separated string ("Alice,Bob", "Alice:2,Bob") or a list
    of such strings and/or {"name": ..., "weight": ...} mappings. Blank names
    are dropped. Order is preserved and repeated names are kept as-is.
    """
    if value is None:
        return []
    if isinstance(value, str):
        entries = value.split(",")
    elif isinstance(value, (list, tuple)):
        entries = value
    else:
        raise TypeError(f"Participants must be a string or a list, got {type(value).__name__}")

    participants = []
    for entry in entries:
        name, weight = _parse_entry(entry)
        if name:
            participants.append((name, weight))
    return participants


def format_weight(weight):
    return format(Decimal(weight).normalize(), "f")


def format_participants(participants):
    """Inverse of parse_participants for the string form: "Alice:2,Bob"."""
    parts = []
    for name, weight in participants:
        if Decimal(weight) == ONE:
            parts.append(name)
        else:
            parts.append(f"{name}:{format_weight(weight)}")
    return ",".join(parts)
