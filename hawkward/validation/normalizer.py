"""
Lenient Normalization of Client Input

Everything the browser sends is untrusted and loosely typed: numbers
arrive as strings, fields go missing, names may carry markup. Instead
of rejecting such input, it is coerced into the canonical shape:

- text is trimmed, stripped of tags and truncated
- numbers are parsed the way a browser's parseFloat would, then clamped
- records that are not objects at all are dropped
- missing top-level stores are filled with empty containers

These are pure functions with no I/O.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from hawkward.models.document import (
    MAX_PAYMENT,
    MAX_SAFE_INTEGER,
    Account,
    Document,
)


_TAG_PATTERN = re.compile(r"<[^>]*>")
_FLOAT_PREFIX = re.compile(
    r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_float(value: Any) -> float:
    """Leading-prefix float parse; NaN when nothing numeric is found."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if not isinstance(value, str):
        return math.nan

    match = _FLOAT_PREFIX.match(value.lstrip())
    if not match:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def sanitize_text(value: Any, max_length: int = 200) -> str:
    """
    Coerce to a trimmed, tag-free string of at most ``max_length`` chars.

    Every ``<...>`` span is removed and the remaining text concatenated,
    so ``"<script>bad</script>Rent"`` becomes ``"badRent"``.

    Booleans render as ``"true"``/``"false"`` and whole floats without a
    fraction. Any other value goes through ``str()``, so a dict or list
    arrives as its Python representation (``"{'a': 1}"``), not as a
    browser would stringify it.
    """
    if not value:
        return ""
    text = _to_text(value).strip()
    text = _TAG_PATTERN.sub("", text)
    return text[:max_length].strip()


def sanitize_number(
    value: Any,
    minimum: float = 0,
    maximum: float = MAX_SAFE_INTEGER,
) -> float:
    """
    Parse ``value`` as a float and clamp it to ``[minimum, maximum]``.

    Non-numeric input yields ``minimum``.
    """
    number = _parse_float(value)
    if math.isnan(number):
        return float(minimum)
    return float(max(minimum, min(maximum, number)))


def normalize_account(raw: Any) -> Optional[Account]:
    """
    Build a canonical Account from a loosely-typed record.

    Returns None when ``raw`` is not an object. Unknown fields are dropped.
    """
    if not isinstance(raw, Mapping):
        return None

    owner_id = raw.get("ownerId")

    return Account(
        id=int(sanitize_number(raw.get("id"), 0, MAX_SAFE_INTEGER)),
        name=sanitize_text(raw.get("name"), 100),
        category=sanitize_text(raw.get("category"), 100),
        type=sanitize_text(raw.get("type"), 20) or "expense",
        monthly_payment=sanitize_number(raw.get("monthlyPayment"), 0, MAX_PAYMENT),
        annual_payment=sanitize_number(raw.get("annualPayment"), 0, MAX_PAYMENT),
        has_reminder=sanitize_text(raw.get("hasReminder"), 10) or "No",
        status=sanitize_text(raw.get("status"), 30) or "Active",
        priority=sanitize_text(raw.get("priority"), 30) or "Important",
        owner_id=sanitize_text(owner_id, 100) or None,
    )


def normalize_accounts(items: Iterable[Any]) -> list[Account]:
    """Normalize each element, dropping the ones that are not records."""
    accounts = []
    for item in items:
        account = normalize_account(item)
        if account is not None:
            accounts.append(account)
    return accounts


def assign_account_ids(accounts: list[Account]) -> list[Account]:
    """
    Give every account without an id (id 0) the next free one.

    New ids continue from the highest id already present, in list order.
    Id 0 is never a stored id: once assigned, an id is kept on every
    later save.
    """
    next_id = max((account.id for account in accounts), default=0) + 1
    assigned = []
    for account in accounts:
        if account.id == 0:
            account = account.model_copy(update={"id": next_id})
            next_id += 1
        assigned.append(account)
    return assigned


def normalize_document(raw: Any) -> Document:
    """
    Coerce anything into a Document with all five stores present.

    Stores of the wrong container type are replaced with empty ones;
    account records are normalized individually.
    """
    data = raw if isinstance(raw, Mapping) else {}

    accounts = data.get("accounts")
    profile = data.get("profile")
    timeline = data.get("timeline")
    goals = data.get("goals")
    settings = data.get("settings")

    return Document(
        accounts=normalize_accounts(accounts) if isinstance(accounts, list) else [],
        profile=dict(profile) if isinstance(profile, Mapping) else {},
        timeline=dict(timeline) if isinstance(timeline, Mapping) else {},
        goals=list(goals) if isinstance(goals, list) else [],
        settings=dict(settings) if isinstance(settings, Mapping) else {},
    )
