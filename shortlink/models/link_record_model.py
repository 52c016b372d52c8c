from dataclasses import dataclass, field
from datetime import datetime, UTC


@dataclass(frozen=True)
class LinkRecordModel:
    """Represent a persisted shortcode -> target URL mapping.

    Attributes:
        code (str):
            The unique short identifier (primary key). Immutable once assigned.
        target_url (str):
            The original long URL that the code redirects to.
        created_at (datetime):
            UTC creation time, set once when the record is minted.
        hit_count (int):
            Number of successful resolves. Only ever changed by the data store's
            atomic increment, never by read-modify-write.
        expires_at (Optional[datetime]):
            Time after which the record is no longer persisted.
            None for links which never expire.

    Example:
        >>> record = LinkRecordModel(code='abc1234', target_url='https://example.com/article/123')
        >>> record.code
        'abc1234'
        >>> record.hit_count
        0
        >>> record.expires_at is None
        True
    """

    code: str
    target_url: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    hit_count: int = 0
    expires_at: datetime | None = None
