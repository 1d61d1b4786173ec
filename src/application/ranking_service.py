"""Application service for ranking GitHub repositories."""

import logging
import os
from collections import Counter
from typing import Any, List, Optional, Sequence

from src.domain.ranking import RankingPolicy, rank, star_count, updated_instant

logger = logging.getLogger(__name__)


class RankingService:
    """Service for ordering repository records by popularity and recency."""

    def __init__(self, policy: Optional[str] = None):
        """
        Initialize ranking service.

        Args:
            policy: ``strict`` or ``lenient``. If None, uses RANKING_POLICY env var.
        """
        if policy is None:
            policy = os.getenv("RANKING_POLICY", RankingPolicy.STRICT.value)

        try:
            self.policy = RankingPolicy(policy.strip().lower() if isinstance(policy, str) else policy)
        except ValueError:
            raise ValueError(f"Unknown ranking policy: {policy!r}") from None

    def rank(self, records: Sequence[Any]) -> List[Any]:
        """
        Rank records by stars, then by last update.

        Args:
            records: Repository records (dicts or objects)

        Returns:
            A new ranked list

        Raises:
            InvalidRecord: Under the strict policy, if a record is not comparable
        """
        logger.info(f"Ranking {len(records)} repositories (policy: {self.policy.value})")
        ranked = rank(records, self.policy)

        if self.policy is RankingPolicy.LENIENT:
            stars = [star_count(record) for record in ranked]
            tied = Counter(value for value in stars if value is not None)
            # A bad timestamp only moves a record when its star count is shared
            demoted = sum(
                1 for record, value in zip(ranked, stars)
                if value is None or (tied[value] > 1 and updated_instant(record) is None)
            )
            if demoted:
                logger.warning(f"{demoted} repositories have invalid ranking fields and were ranked last")

        return ranked

    def top(self, records: Sequence[Any], limit: int) -> List[Any]:
        """Return the ``limit`` highest ranked records."""
        if limit <= 0:
            return []
        return self.rank(records)[:limit]
