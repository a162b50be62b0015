"""Domain models for short links and their redirect analytics.

Classes:
    Platform:
        Enumerated source platform of a redirect, derived from request headers.
    StatsModel:
        A single redirect analytics record.
    LinkModel:
        A short link mapping. `stats` is a transient projection filled in by
        aggregation and is never persisted with the link.
    LinkStatsSummary:
        Per-link stats with a count-by-platform breakdown.

Example:
    >>> link = LinkModel(id='aZ3kP9qL', original_url='https://example.com/some/long/path')
    >>> link.to_item()['id']
    'aZ3kP9qL'
    >>> LinkModel.from_item(link.to_item()) == link
    True
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any

from urlshortener.types import DynamoDBItem


class Platform(StrEnum):
    INSTAGRAM = 'Instagram'
    TWITTER = 'Twitter'
    YOUTUBE = 'YouTube'
    UNKNOWN = 'Unknown'

    @classmethod
    def parse(cls, value: str | None) -> 'Platform':
        """Map a stored platform name back to a Platform, `Unknown` if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, UTC)
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


# fmt: off
@dataclass(frozen=True)
class StatsModel:
    id: str                                                   # Globally unique record id (uuid4)
    link_id: str                                              # LinkModel.id, no referential integrity
    platform: Platform = Platform.UNKNOWN                     # Source platform of the redirect
    created_at: datetime = field(default_factory=_utcnow)     # Time of the redirect event
# fmt: on

    def to_item(self) -> DynamoDBItem:
        return {
            'id': self.id,
            'link_id': self.link_id,
            'platform': str(self.platform),
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_item(cls, item: DynamoDBItem) -> 'StatsModel':
        return cls(
            id=item['id'],
            link_id=item.get('link_id', ''),
            platform=Platform.parse(item.get('platform')),
            created_at=_parse_timestamp(item.get('created_at')),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.to_item()


# fmt: off
@dataclass(frozen=True)
class LinkModel:
    id: str                                                   # Unique short identifier, immutable
    original_url: str                                         # Validated long URL the link redirects to
    created_at: datetime = field(default_factory=_utcnow)     # Time of creation
    stats: tuple[StatsModel, ...] = ()                        # Transient, populated by aggregation only
# fmt: on

    def to_item(self) -> DynamoDBItem:
        """Serialize for the authoritative store (stats are never persisted)."""
        return {
            'id': self.id,
            'original_url': self.original_url,
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_item(cls, item: DynamoDBItem) -> 'LinkModel':
        return cls(
            id=item['id'],
            original_url=item.get('original_url', ''),
            created_at=_parse_timestamp(item.get('created_at')),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses, including joined stats."""
        return {
            **self.to_item(),
            'stats': [stat.to_dict() for stat in self.stats],
        }


@dataclass(frozen=True)
class LinkStatsSummary:
    link_id: str
    details: tuple[StatsModel, ...] = ()

    @property
    def total_clicks(self) -> int:
        return len(self.details)

    @property
    def platform_counts(self) -> dict[str, int]:
        return dict(Counter(str(stat.platform) for stat in self.details))

    def to_dict(self) -> dict[str, Any]:
        return {
            'link_id': self.link_id,
            'total_clicks': self.total_clicks,
            'platform_counts': self.platform_counts,
            'details': [stat.to_dict() for stat in self.details],
        }
