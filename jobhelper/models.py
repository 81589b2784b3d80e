"""
Data models shared by the verification pipeline and the relevance scorer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Keyword:
    """A block-list or priority-list entry."""

    text: str
    enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Keyword":
        return cls(text=str(data.get("text", "")), enabled=bool(data.get("enabled", False)))


@dataclass
class VerificationSignal:
    """
    What a search revealed about an employer.

    `social` keeps insertion order and holds no duplicates. `timestamp` is
    epoch milliseconds, stamped by the queue when the signal is cached.
    """

    website: Optional[str] = None
    social: List[str] = field(default_factory=list)
    timestamp: Optional[int] = None

    @property
    def verified(self) -> bool:
        return self.website is not None or len(self.social) > 0

    def add_social(self, href: str) -> None:
        if href not in self.social:
            self.social.append(href)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "website": self.website,
            "social": list(self.social),
            "verified": self.verified,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerificationSignal":
        signal = cls(website=data.get("website"), timestamp=data.get("timestamp"))
        for href in data.get("social") or []:
            signal.add_social(href)
        return signal


@dataclass(frozen=True)
class VerificationResult:
    """Caller-facing outcome of a verification request."""

    verified: bool
    website: Optional[str]
    social: List[str]
    from_cache: bool

    @classmethod
    def from_signal(cls, signal: VerificationSignal, from_cache: bool) -> "VerificationResult":
        return cls(
            verified=signal.verified,
            website=signal.website,
            social=list(signal.social),
            from_cache=from_cache,
        )


@dataclass(frozen=True)
class ScoreInputs:
    """
    Read-only view of one listing.

    `metadata` holds scoped fragments from the listing card (salary line,
    workplace type, apply method). `easy_apply` of None means the flag is
    detected from those fragments.
    """

    listing_text: str
    title: str = ""
    company_name: str = ""
    metadata: tuple = ()
    easy_apply: Optional[bool] = None


@dataclass(frozen=True)
class FilterDecision:
    should_filter: bool
    reason: Optional[str] = None


KEEP = FilterDecision(should_filter=False)


@dataclass(frozen=True)
class ListingScore:
    """Filter decision plus priority score; the score is only set for kept listings."""

    decision: FilterDecision
    priority_score: Optional[int] = None
    matched_keywords: List[str] = field(default_factory=list)


@dataclass
class ScorerConfig:
    block_keywords: List[Keyword] = field(default_factory=list)
    priority_keywords: List[Keyword] = field(default_factory=list)
    easy_apply_filter: bool = False
    min_hourly_rate: float = 0.0  # 0 disables the rate check
    disallowed_terms: List[str] = field(default_factory=list)
