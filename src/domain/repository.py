"""Domain entities for GitHub repositories."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from src.domain.ranking import InvalidRecord, star_count
from src.domain.timestamps import parse_timestamp

_KNOWN_FIELDS = ("id", "name", "full_name", "owner", "stargazers_count", "updated_at", "html_url")


@dataclass(frozen=True)
class RepositoryRecord:
    """Immutable repository metadata record."""

    id: Any
    name: str
    full_name: str
    owner: Optional[str]
    stargazers_count: int
    updated_at: datetime
    url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RepositoryRecord":
        """
        Create a record from a GitHub REST API repository object.

        Fields other than the ones modelled here are kept in ``extra``.

        Raises:
            InvalidRecord: If stargazers_count or updated_at is unusable
        """
        problems = []
        stars = star_count(payload)
        if stars is None:
            problems.append((0, f"stargazers_count is not a non-negative integer: {payload.get('stargazers_count')!r}"))
        updated_at = parse_timestamp(payload.get("updated_at"))
        if updated_at is None:
            problems.append((0, f"updated_at is not a valid timestamp: {payload.get('updated_at')!r}"))
        if problems:
            raise InvalidRecord(problems, [payload])

        # REST nests the owner, the crawler dumps flatten it
        owner = payload.get("owner")
        if isinstance(owner, dict):
            owner = owner.get("login")

        full_name = payload.get("full_name") or ""
        name = payload.get("name") or full_name.split("/", 1)[-1]

        return cls(
            id=payload.get("id"),
            name=name,
            full_name=full_name,
            owner=owner,
            stargazers_count=stars,
            updated_at=updated_at,
            url=payload.get("html_url") or payload.get("url"),
            extra={key: value for key, value in payload.items() if key not in _KNOWN_FIELDS and key != "url"},
        )

    def to_payload(self) -> Dict[str, Any]:
        """Convert back to a JSON-serializable dict."""
        payload = dict(self.extra)
        payload.update(
            id=self.id,
            name=self.name,
            full_name=self.full_name,
            owner=self.owner,
            stargazers_count=self.stargazers_count,
            updated_at=self.updated_at.isoformat(),
            html_url=self.url,
        )
        return payload
