from typing import Any, Dict, List

from .models import ScoreInputs

REQUIRED_STR_FIELDS = ["title", "company"]
OPTIONAL_STR_FIELDS = ["listing_text"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_listing(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Listing must be a JSON object"]

    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_STR_FIELDS:
        if f in data and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    metadata = data.get("metadata")
    if metadata is not None:
        if not isinstance(metadata, list) or not all(isinstance(m, str) for m in metadata):
            errors.append("Field 'metadata' must be a list of strings if provided")

    easy_apply = data.get("easy_apply")
    if easy_apply is not None and not isinstance(easy_apply, bool):
        errors.append("Field 'easy_apply' must be true or false if provided")

    return errors


def listing_from_dict(data: Dict[str, Any]) -> ScoreInputs:
    """Build ScoreInputs from an already validated listing dict."""
    title = data["title"].strip()
    company = data["company"].strip()
    text = data.get("listing_text") or ""
    return ScoreInputs(
        # The listing text always carries the card's title and company line.
        listing_text="\n".join(t for t in (title, company, text) if t),
        title=title,
        company_name=company,
        metadata=tuple(data.get("metadata") or ()),
        easy_apply=data.get("easy_apply"),
    )
