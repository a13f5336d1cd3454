from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .config import CLEAN_COLUMNS, DATE_FORMAT, SOURCE_COLUMNS, TIME_FORMAT, UNKNOWN_BOROUGH
from .errors import ParseError

log = logging.getLogger(__name__)

SEASONS = ["Winter", "Spring", "Summer", "Fall"]


def normalize_strings(series: pd.Series) -> pd.Series:
    text = series.astype(str).str.strip()
    return text.where(series.notna() & text.ne(""), np.nan)


def _first_failure(raw: pd.Series, parsed: pd.Series, column: str) -> None:
    failed = parsed.isna()
    if failed.any():
        label = failed[failed].index[0]
        raise ParseError(
            f"Row {label}: {column} value {raw.loc[label]!r} does not match the expected format"
        )


def normalize_keys(series: pd.Series) -> pd.Series:
    # Blank keys make read_csv infer floats; keep "101", not "101.0".
    if pd.api.types.is_float_dtype(series):
        series = series.astype("Int64")
    return normalize_strings(series)


def parse_occur_date(series: pd.Series) -> pd.Series:
    parsed = pd.to_datetime(series, format=DATE_FORMAT, errors="coerce")
    _first_failure(series, parsed, "occur_date")
    return parsed.dt.normalize()


def parse_occur_time(series: pd.Series) -> pd.Series:
    clock = pd.to_datetime(normalize_strings(series), format=TIME_FORMAT, errors="coerce")
    parsed = clock - clock.dt.normalize()
    _first_failure(series, parsed, "occur_time")
    return parsed


def clean_dataframe(raw: pd.DataFrame) -> pd.DataFrame:
    missing = [col for col in SOURCE_COLUMNS if col not in raw.columns]
    if missing:
        raise ParseError(f"Source is missing required columns: {', '.join(missing)}")

    df = raw[list(SOURCE_COLUMNS)].rename(columns=SOURCE_COLUMNS)
    df = df.assign(
        incident_key=normalize_keys(df["incident_key"]),
        occur_date=parse_occur_date(df["occur_date"]),
        occur_time=parse_occur_time(df["occur_time"]),
        borough=normalize_strings(df["borough"]).fillna(UNKNOWN_BOROUGH).astype("category"),
        latitude=pd.to_numeric(df["latitude"], errors="coerce").astype(float),
        longitude=pd.to_numeric(df["longitude"], errors="coerce").astype(float),
    )
    log.info("Cleaned table: %s rows x %s columns", f"{len(df):,}", df.shape[1])
    return df[CLEAN_COLUMNS]


def season_of_month(month: int) -> str:
    if month in (12, 1, 2):
        return "Winter"
    if month in (3, 4, 5):
        return "Spring"
    if month in (6, 7, 8):
        return "Summer"
    if month in (9, 10, 11):
        return "Fall"
    raise ValueError(f"Month out of range: {month}")


def with_derived_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with ``month``, ``year``, ``hour`` and ``season`` added."""
    month = df["occur_date"].dt.month.astype(int)
    return df.assign(
        month=month,
        year=df["occur_date"].dt.year.astype(int),
        hour=(df["occur_time"].dt.seconds // 3600).astype(int),
        season=month.map(season_of_month).astype(pd.CategoricalDtype(SEASONS)),
    )
