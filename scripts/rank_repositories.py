#!/usr/bin/env python3
"""Script to rank a JSON export of GitHub repositories by stars and recency."""

import logging
import sys
import os
from datetime import datetime

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.application.ranking_service import RankingService
from src.infrastructure.record_file import load_records, write_records

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Rank repositories from INPUT_FILE and write them to OUTPUT_DIR."""
    try:
        input_file = os.getenv("INPUT_FILE")
        if not input_file:
            logger.error("INPUT_FILE is not set")
            return 1

        output_dir = os.getenv("OUTPUT_DIR", "artifacts")
        os.makedirs(output_dir, exist_ok=True)

        service = RankingService()
        records = load_records(input_file)

        top_n = os.getenv("TOP_N")
        if top_n:
            ranked = service.top(records, int(top_n))
        else:
            ranked = service.rank(records)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_file = os.path.join(output_dir, f"ranked_repositories_{timestamp}.json")
        write_records(ranked, output_file)

        logger.info(f"Ranking completed. File: {output_file}")
        return 0
    except Exception as e:
        logger.error(f"Ranking failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
