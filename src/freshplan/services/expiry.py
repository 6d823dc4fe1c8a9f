"""Freshness classification from expiry dates."""

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum

EXPIRING_MAX_DAYS = 3
WARNING_MAX_DAYS = 7
_SECONDS_PER_DAY = 86400


class ExpiryTier(StrEnum):
    """Freshness bucket of an ingredient."""

    EXPIRED = "expired"
    EXPIRING = "expiring"
    WARNING = "warning"
    FRESH = "fresh"


@dataclass(frozen=True)
class ExpiryStatus:
    """Freshness tier with the whole days left until expiry."""

    tier: ExpiryTier
    days_remaining: int

    @property
    def label(self) -> str:
        """Short badge text."""
        if self.tier is ExpiryTier.EXPIRED:
            return "Expired"
        return f"{self.days_remaining} days left"

    @property
    def needs_attention(self) -> bool:
        """True when the item should be used soon or discarded."""
        return self.tier in {ExpiryTier.EXPIRED, ExpiryTier.EXPIRING}


def days_until(expiry_date: date, now: date | datetime) -> int:
    """Return whole days until expiry, rounding partial days up."""
    if not isinstance(now, datetime):
        now = datetime.combine(now, time.min)
    expires_at = datetime.combine(expiry_date, time.min, tzinfo=now.tzinfo)
    seconds = (expires_at - now).total_seconds()
    return math.ceil(seconds / _SECONDS_PER_DAY)


def classify(expiry_date: date, now: date | datetime) -> ExpiryStatus:
    """Classify an expiry date relative to ``now``."""
    days = days_until(expiry_date, now)
    if days < 0:
        tier = ExpiryTier.EXPIRED
    elif days <= EXPIRING_MAX_DAYS:
        tier = ExpiryTier.EXPIRING
    elif days <= WARNING_MAX_DAYS:
        tier = ExpiryTier.WARNING
    else:
        tier = ExpiryTier.FRESH
    return ExpiryStatus(tier=tier, days_remaining=days)
