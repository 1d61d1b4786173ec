"""JSON file storage for repository record lists."""

import dataclasses
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence

logger = logging.getLogger(__name__)


def load_records(input_file: str) -> List[Dict[str, Any]]:
    """
    Load repository records from a JSON file.

    Accepts a JSON array of objects, or a search response object with an
    ``items`` array.

    Raises:
        ValueError: If the file does not hold a list of objects
    """
    with open(input_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "items" in data:
        data = data["items"]

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{input_file} does not contain a list of repository objects")

    logger.info(f"Loaded {len(data)} repositories from {input_file}")
    return data


def _to_row(record: Any) -> Dict[str, Any]:
    if hasattr(record, "to_payload"):
        return record.to_payload()
    if isinstance(record, Mapping):
        return dict(record)
    if dataclasses.is_dataclass(record):
        return dataclasses.asdict(record)
    return dict(vars(record))


def write_records(records: Sequence[Any], output_file: str):
    """Write records to a JSON file, datetimes as ISO strings."""
    data = []
    for record in records:
        row_dict = _to_row(record)
        for key, value in row_dict.items():
            if isinstance(value, datetime):
                row_dict[key] = value.isoformat()
        data.append(row_dict)

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(data)} repositories to {output_file}")
