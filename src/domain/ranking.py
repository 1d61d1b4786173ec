"""Popularity ranking of repository records."""

import logging
from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, MutableSequence, Optional, Sequence, Tuple

from src.domain.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

# Placeholders for invalid fields. The validity flag in the key decides
# the order, these only keep the tuples comparable.
_NO_STARS = 0
_NO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


class RankingPolicy(str, Enum):
    """How records with unusable ranking fields are handled."""

    STRICT = "strict"
    LENIENT = "lenient"


class InvalidRecord(ValueError):
    """Raised when records cannot be ranked because of missing or malformed fields."""

    def __init__(self, problems: List[Tuple[int, str]], records: Optional[Sequence[Any]] = None):
        self.problems = problems
        details = []
        for index, reason in problems:
            label = f"#{index}"
            if records is not None:
                ident = _identify(records[index])
                if ident:
                    label = f"#{index} ({ident})"
            details.append(f"{label}: {reason}")
        super().__init__(f"{len(problems)} invalid record(s): " + "; ".join(details))


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _identify(record: Any) -> Optional[str]:
    for name in ("full_name", "name", "id"):
        value = _field(record, name)
        if value is not None:
            return str(value)
    return None


def star_count(record: Any) -> Optional[int]:
    """Return the record's star count, or None if it is missing or not a non-negative integer."""
    stars = _field(record, "stargazers_count")
    # bool is an int subclass
    if isinstance(stars, bool) or not isinstance(stars, int) or stars < 0:
        return None
    return stars


def updated_instant(record: Any) -> Optional[datetime]:
    """Return the record's ``updated_at`` as a UTC instant, or None if unparsable."""
    return parse_timestamp(_field(record, "updated_at"))


def ranking_key(record: Any) -> Tuple[bool, int, bool, datetime]:
    """
    Build the sort key for a record.

    Sorting with ``reverse=True`` puts more stars first, then the most recent
    ``updated_at``. Invalid values carry a False flag so they sort after
    valid ones at their level.
    """
    stars = star_count(record)
    updated = updated_instant(record)
    return (
        stars is not None,
        _NO_STARS if stars is None else stars,
        updated is not None,
        _NO_TIMESTAMP if updated is None else updated,
    )


def _coerce_policy(policy) -> RankingPolicy:
    try:
        return RankingPolicy(policy)
    except ValueError:
        raise ValueError(f"Unknown ranking policy: {policy!r}") from None


def validate(records: Sequence[Any]) -> None:
    """
    Check that records can be ranked under the strict policy.

    Every record needs a star count. A timestamp is only required where the
    star count is shared with another record, since only then is it compared.

    Raises:
        InvalidRecord: listing every offending record
    """
    problems: List[Tuple[int, str]] = []
    stars = [star_count(record) for record in records]

    for index, value in enumerate(stars):
        if value is None:
            raw = _field(records[index], "stargazers_count")
            problems.append((index, f"stargazers_count is not a non-negative integer: {raw!r}"))

    tied = Counter(value for value in stars if value is not None)
    for index, value in enumerate(stars):
        if value is not None and tied[value] > 1 and updated_instant(records[index]) is None:
            raw = _field(records[index], "updated_at")
            problems.append((index, f"updated_at is not a valid timestamp: {raw!r}"))

    if problems:
        problems.sort()
        raise InvalidRecord(problems, records)


def rank(records: Sequence[Any], policy=RankingPolicy.STRICT) -> List[Any]:
    """
    Return the records ordered by stars, then by recency, both descending.

    The input is left untouched. Records with equal keys keep their input order.

    Args:
        records: Mappings or objects exposing ``stargazers_count`` and ``updated_at``
        policy: ``strict`` to fail on invalid records, ``lenient`` to sort them last

    Returns:
        A new list with the same elements in ranked order

    Raises:
        InvalidRecord: Under the strict policy, if any record is not comparable
    """
    ranked = list(records)
    return rank_in_place(ranked, policy)


def rank_in_place(records: MutableSequence[Any], policy=RankingPolicy.STRICT) -> MutableSequence[Any]:
    """
    Rank a list in place and return it.

    Callers must not access the list from other threads while it is sorted.
    On InvalidRecord the list is left unchanged.
    """
    if _coerce_policy(policy) is RankingPolicy.STRICT:
        validate(records)

    if isinstance(records, list):
        records.sort(key=ranking_key, reverse=True)
    else:
        records[:] = sorted(records, key=ranking_key, reverse=True)

    logger.debug(f"Ranked {len(records)} records")
    return records


def is_ranked(records: Sequence[Any]) -> bool:
    """Check that every adjacent pair is in ranking order."""
    keys = [ranking_key(record) for record in records]
    return all(earlier >= later for earlier, later in zip(keys, keys[1:]))
