"""
Street section loader.

Supports loading street sections from:
- CSV files with street, from and to columns
- JSON files holding a list of {"street", "from", "to", "timespans"} objects
"""

import json
import logging
from pathlib import Path
from typing import List, Union

import pandas as pd
from pydantic import ValidationError

from ..models import StreetSection

logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    "street_name": "street",
    "start": "from",
    "from_": "from",
    "end": "to",
}
REQUIRED_COLUMNS = ("street", "from", "to")


class SectionLoader:
    """Loads street sections from CSV or JSON files."""

    SUPPORTED_EXTENSIONS = {".csv", ".json"}

    def load(self, path: Union[str, Path]) -> List[StreetSection]:
        """Load street sections from a file.

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If the file type is unsupported or columns are missing
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Section file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(f"Unsupported file type: {suffix}")

        if suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError(f"Expected a list of street sections in {path}")
        else:
            records = self._load_csv(path)

        sections = []
        for position, record in enumerate(records):
            try:
                sections.append(StreetSection.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid street section #{position} in {path.name}: {e}")

        logger.info(f"Loaded {len(sections)} street section(s) from {path.name}")
        return sections

    def _load_csv(self, path: Path) -> List[dict]:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        df.columns = [str(col).strip().lower() for col in df.columns]
        df = df.rename(columns=COLUMN_ALIASES)

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"Missing required column(s) in {path.name}: {', '.join(missing)}")

        df = df[list(REQUIRED_COLUMNS)].apply(lambda col: col.str.strip())
        return df.to_dict(orient="records")
