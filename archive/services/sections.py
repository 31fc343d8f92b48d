"""Section filtering and reverse-chronological ordering."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from archive.models.domain import LogicalSection, RawDocument


SECTION_TERMS: Dict[str, Tuple[str, ...]] = {
    LogicalSection.SCIENCE.value: ("Science", "Health", "Climate"),
    LogicalSection.ENTERTAINMENT.value: ("Arts", "Movies", "Television", "Theater", "Music", "Books", "Style"),
    LogicalSection.TECHNOLOGY.value: ("Technology", "Personal Tech", "Science"),
    LogicalSection.BUSINESS.value: ("Business", "Economy", "Money", "DealBook", "Markets"),
    LogicalSection.HEALTH.value: ("Health", "Well", "Science"),
    LogicalSection.SPORTS.value: ("Sports",),
}

# archive pub_date looks like 2024-01-05T10:00:00+0000
_DATE_FORMATS = ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z")


def section_terms(section: str) -> Tuple[str, ...]:
    """Upstream section-name substrings for a tag; unknown tags match themselves."""
    return SECTION_TERMS.get(section, (section,))


def filter_by_section(docs: List[RawDocument], section: str) -> List[RawDocument]:
    if section == LogicalSection.GENERAL.value:
        return docs
    needles = [term.upper() for term in section_terms(section)]
    return [doc for doc in docs if any(n in (doc.section_name or "").upper() for n in needles)]


def parse_pub_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an upstream publication date; ``None`` when missing or unparsable."""
    if not value:
        return None
    text = value.strip()
    parsed: Optional[datetime] = None
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(doc: RawDocument) -> Tuple[bool, float]:
    parsed = parse_pub_date(doc.pub_date)
    if parsed is None:
        return (False, 0.0)
    return (True, parsed.timestamp())


def sort_by_date_descending(docs: Sequence[RawDocument]) -> List[RawDocument]:
    """Most recent first; undated documents go last, keeping their input order."""
    return sorted(docs, key=_sort_key, reverse=True)
