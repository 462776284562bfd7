from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Optional


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a short link mapping.

    Attributes:
        shortcode (str):
            The unique short identifier representing the link.
        target (str):
            The original long URL that the shortcode redirects to.
        created_at (datetime):
            Moment of creation (UTC). Never changes.
        expires_at (Optional[datetime]):
            Moment after which the link is treated as absent.
            None means the link never expires.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> link = ShortLinkModel(
        ...     shortcode='abc12345',
        ...     target='https://example.com/article/123',
        ...     expires_at=datetime.now(UTC) + timedelta(days=1),
        ... )
        >>> link.target
        'https://example.com/article/123'
        >>> link.is_expired()
        False
    """

    shortcode: str
    target: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            'shortcode': self.shortcode,
            'target': self.target,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ShortLinkModel':
        expires_at = data.get('expires_at')
        return cls(
            shortcode=data['shortcode'],
            target=data['target'],
            created_at=datetime.fromisoformat(data['created_at']),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )


@dataclass(frozen=True)
class SearchPage:
    """One page of search results.

    Attributes:
        links (list[ShortLinkModel]):
            Matching links in the data store's iteration order.
        next_cursor (Optional[str]):
            Opaque cursor for the following page. None on the last page.
    """

    links: list[ShortLinkModel]
    next_cursor: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'data': [link.to_dict() for link in self.links],
            'next_cursor': self.next_cursor,
        }
