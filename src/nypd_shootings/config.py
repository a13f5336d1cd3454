from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

BASE_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_SOURCE_URL = (
    "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD"
)
DEFAULT_OUTPUT_DIR = BASE_DIR / "reports"
DEFAULT_TIMEOUT = 300

# Source header -> cleaned column name.
SOURCE_COLUMNS: Dict[str, str] = {
    "INCIDENT_KEY": "incident_key",
    "OCCUR_DATE": "occur_date",
    "OCCUR_TIME": "occur_time",
    "BORO": "borough",
    "Latitude": "latitude",
    "Longitude": "longitude",
}
CLEAN_COLUMNS: List[str] = list(SOURCE_COLUMNS.values())
DATE_FORMAT = "%m/%d/%Y"
TIME_FORMAT = "%H:%M:%S"
UNKNOWN_BOROUGH = "UNKNOWN"


@dataclass(frozen=True)
class ReportConfig:
    source: str = DEFAULT_SOURCE_URL
    output_dir: Path = DEFAULT_OUTPUT_DIR
    limit: int | None = None
    cache_path: Path | None = None
    timeout: float = DEFAULT_TIMEOUT
    preview_rows: int = 5
    preview_columns: int = 8

    @property
    def figures_dir(self) -> Path:
        return Path(self.output_dir) / "figures"

    @property
    def report_path(self) -> Path:
        return Path(self.output_dir) / "shooting_report.md"

    @property
    def metrics_path(self) -> Path:
        return Path(self.output_dir) / "inspection_metrics.json"
