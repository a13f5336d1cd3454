from __future__ import annotations

import calendar

import pandas as pd

from .cleaning import with_derived_columns

PERIODS = ("month", "year")
KEY_SCOPES = ("period", "global")
MONTH_LABELS = {number: calendar.month_abbr[number] for number in range(1, 13)}


def _ensure_derived(df: pd.DataFrame) -> pd.DataFrame:
    if {"month", "year", "hour"}.issubset(df.columns):
        return df
    return with_derived_columns(df)


def count_incidents(df: pd.DataFrame, by: str, key_scope: str = "period") -> pd.DataFrame:
    """Distinct incident keys per ``month`` or ``year``, ascending by period.

    With ``key_scope="period"`` a key counts once in every period it appears
    in. With ``key_scope="global"`` it counts once overall, in the latest
    period it appears in.
    """
    if by not in PERIODS:
        raise ValueError(f"Unsupported period {by!r}; expected one of {PERIODS}")
    if key_scope not in KEY_SCOPES:
        raise ValueError(f"Unsupported key scope {key_scope!r}; expected one of {KEY_SCOPES}")
    if df.empty:
        return pd.DataFrame({by: pd.Series(dtype=int), "incidents": pd.Series(dtype=int)})

    featured = _ensure_derived(df)
    subset = featured[["incident_key", "occur_date", by]].dropna(subset=["incident_key"])
    if key_scope == "global":
        subset = (
            subset.sort_values("occur_date", kind="stable")
            .drop_duplicates(subset=["incident_key"], keep="last")
        )
    counts = (
        subset.groupby(by)["incident_key"]
        .nunique()
        .reset_index(name="incidents")
        .sort_values(by)
        .reset_index(drop=True)
    )
    return counts.astype({by: int, "incidents": int})


def count_by_borough(df: pd.DataFrame) -> pd.DataFrame:
    """Victim records and distinct incidents per borough, busiest first."""
    if df.empty:
        return pd.DataFrame(
            {
                "borough": pd.Series(dtype=str),
                "records": pd.Series(dtype=int),
                "incidents": pd.Series(dtype=int),
            }
        )
    grouped = df.groupby("borough", observed=True)
    counts = pd.DataFrame(
        {
            "records": grouped.size(),
            "incidents": grouped["incident_key"].nunique(),
        }
    ).reset_index()
    counts["borough"] = counts["borough"].astype(str)
    return counts.sort_values(["records", "borough"], ascending=[False, True]).reset_index(drop=True)


def count_by_hour(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame({"hour": pd.Series(dtype=int), "incidents": pd.Series(dtype=int)})
    featured = _ensure_derived(df)
    return (
        featured.groupby("hour")["incident_key"]
        .nunique()
        .reindex(range(24), fill_value=0)
        .rename_axis("hour")
        .reset_index(name="incidents")
    )


def month_label(month: int) -> str:
    if month not in MONTH_LABELS:
        raise ValueError(f"Month out of range: {month}")
    return MONTH_LABELS[month]


def densify_months(monthly: pd.DataFrame) -> pd.DataFrame:
    """Reindex a month aggregate onto the full 1-12 axis, filling zeros."""
    return (
        monthly.set_index("month")["incidents"]
        .reindex(range(1, 13), fill_value=0)
        .rename_axis("month")
        .reset_index()
        .astype({"month": int, "incidents": int})
    )


def with_month_labels(monthly: pd.DataFrame) -> pd.DataFrame:
    return monthly.assign(label=monthly["month"].map(month_label))
