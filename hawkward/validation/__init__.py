"""Input normalization package."""

from hawkward.validation.normalizer import (
    assign_account_ids,
    normalize_account,
    normalize_accounts,
    normalize_document,
    sanitize_number,
    sanitize_text,
)

__all__ = [
    "assign_account_ids",
    "normalize_account",
    "normalize_accounts",
    "normalize_document",
    "sanitize_number",
    "sanitize_text",
]
