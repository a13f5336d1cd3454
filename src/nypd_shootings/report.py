from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List

import numpy as np
import pandas as pd

from .aggregate import month_label
from .trend import TrendFit

log = logging.getLogger(__name__)

FIGURE_TITLES = {
    "borough_map": "Incident locations by borough",
    "borough_counts": "Victims per borough",
    "hour_histogram": "Time of day",
    "seasonal_hour_grid": "Time of day by season",
    "monthly_incidents": "Incidents per month",
    "yearly_trend": "Incidents per year with linear trend",
}


def summarize_schema(
    df: pd.DataFrame,
    sample_columns: List[str] | None = None,
    n_rows: int = 5,
    n_columns: int = 8,
) -> Dict[str, object]:
    """Shape, dtypes and a small string preview of ``df``."""
    schema_profile: Dict[str, object] = {}
    schema_profile["rows"] = int(len(df))
    schema_profile["columns"] = int(df.shape[1])
    schema_profile["column_types"] = {col: str(dtype) for col, dtype in df.dtypes.items()}
    schema_profile["numeric_columns"] = df.select_dtypes(include=[np.number]).columns.tolist()
    schema_profile["categorical_columns"] = df.select_dtypes(
        include=["object", "category"]
    ).columns.tolist()

    preview_cols = [col for col in (sample_columns or []) if col in df.columns]
    if not preview_cols:
        preview_cols = df.columns[:n_columns].tolist()
    sample_df = df[preview_cols].head(n_rows).astype(str).replace({"nan": "", "NaT": ""})
    schema_profile["sample_columns"] = preview_cols
    schema_profile["sample_rows"] = sample_df.to_dict(orient="records")
    return schema_profile


def compute_quality_metrics(df: pd.DataFrame) -> Dict[str, object]:
    missing = df.isna().mean().sort_values(ascending=False).round(4).to_dict()
    top_boroughs = df["borough"].astype(str).value_counts().head(5).to_dict()
    return {
        "records": int(len(df)),
        "unique_incidents": int(df["incident_key"].nunique()),
        "date_min": str(df["occur_date"].min().date()) if not df.empty else None,
        "date_max": str(df["occur_date"].max().date()) if not df.empty else None,
        "located_share": float(df[["latitude", "longitude"]].notna().all(axis=1).mean())
        if not df.empty
        else 0.0,
        "missing_fraction": {col: float(share) for col, share in missing.items()},
        "top_boroughs": {name: int(count) for name, count in top_boroughs.items()},
    }


def compute_insights(
    hourly: pd.DataFrame,
    monthly: pd.DataFrame,
    yearly: pd.DataFrame,
    borough_counts: pd.DataFrame,
) -> Dict[str, object]:
    hour_counts = hourly.set_index("hour")["incidents"]
    month_counts = monthly.set_index("month")["incidents"]
    year_counts = yearly.set_index("year")["incidents"]
    busiest = borough_counts.iloc[0]
    total_records = int(borough_counts["records"].sum())
    return {
        "hourly_peak": {
            "hour": int(hour_counts.idxmax()),
            "incidents": int(hour_counts.max()),
            "min_hour": int(hour_counts.idxmin()),
            "min_incidents": int(hour_counts.min()),
        },
        "monthly_peak": {
            "month": month_label(int(month_counts.idxmax())),
            "incidents": int(month_counts.max()),
            "min_month": month_label(int(month_counts.idxmin())),
            "min_incidents": int(month_counts.min()),
        },
        "yearly_extremes": {
            "max_year": int(year_counts.idxmax()),
            "max_incidents": int(year_counts.max()),
            "min_year": int(year_counts.idxmin()),
            "min_incidents": int(year_counts.min()),
        },
        "busiest_borough": {
            "name": str(busiest["borough"]),
            "records": int(busiest["records"]),
            "share": float(busiest["records"] / total_records) if total_records else 0.0,
        },
    }


def preview_table(profile: Dict[str, object]) -> str:
    preview = pd.DataFrame(profile["sample_rows"], columns=profile["sample_columns"])
    return preview.to_markdown(index=False)


def format_borough_counts(top_boroughs: Dict[str, int], records: int) -> str:
    parts = []
    for borough, count in top_boroughs.items():
        share = count / records if records else 0.0
        parts.append(f"{borough.title()} {count:,} ({share:.0%})")
    return "; ".join(parts)


def describe_missing(missing_fraction: Dict[str, float], records: int) -> str:
    gaps = {col: share for col, share in missing_fraction.items() if share > 0}
    if not gaps:
        return "- Every victim record has all six fields populated."
    return "\n".join(
        f"- `{col}` is blank on {share:.1%} of victim records (~{round(share * records):,})"
        for col, share in sorted(gaps.items(), key=lambda kv: kv[1], reverse=True)
    )


def describe_trend(trend: TrendFit) -> str:
    direction = "rising" if trend.slope > 0 else "falling"
    coefficients = pd.DataFrame(
        {
            "term": ["Intercept", "Year"],
            "estimate": [trend.intercept, trend.slope],
            "std. error": [trend.intercept_se, trend.slope_se],
        }
    )
    return "\n".join(
        [
            coefficients.to_markdown(index=False, floatfmt=",.2f"),
            "",
            f"- R²: {trend.r_squared:.3f} over {trend.n_obs} years "
            f"({trend.first_year}–{trend.last_year}).",
            f"- The fitted line is {direction} by about {abs(trend.slope):,.0f} incidents per year.",
        ]
    )


def build_report_markdown(
    raw_profile: Dict[str, object],
    clean_profile: Dict[str, object],
    metrics: Dict[str, object],
    insights: Dict[str, object],
    trend: TrendFit,
    figures: Dict[str, Path],
    report_dir: Path,
) -> str:
    hourly_peak = insights["hourly_peak"]
    monthly_peak = insights["monthly_peak"]
    yearly = insights["yearly_extremes"]
    busiest = insights["busiest_borough"]
    figure_lines: List[str] = []
    for name, path in figures.items():
        relative = Path(path).resolve().relative_to(Path(report_dir).resolve())
        figure_lines.extend([f"### {FIGURE_TITLES.get(name, name)}", "", f"![{name}]({relative.as_posix()})", ""])

    md_lines = [
        "# NYPD Shooting Incidents — Exploratory Report",
        "",
        "## Raw Data Preview",
        f"{raw_profile['rows']:,} rows x {raw_profile['columns']} columns as downloaded.",
        "",
        preview_table(raw_profile),
        "",
        "## Cleaned Data Preview",
        f"{clean_profile['rows']:,} rows x {clean_profile['columns']} columns after pruning and type coercion.",
        "",
        preview_table(clean_profile),
        "",
        "## Dataset Snapshot",
        f"- **Victim records:** {metrics['records']:,} ({metrics['unique_incidents']:,} distinct incidents)",
        f"- **Temporal coverage:** {metrics['date_min']} to {metrics['date_max']}",
        f"- **Records with coordinates:** {metrics['located_share']:.1%}",
        f"- **Boroughs:** {format_borough_counts(metrics['top_boroughs'], metrics['records'])}",
        "",
        "## Data Quality Watchlist",
        describe_missing(metrics["missing_fraction"], metrics["records"]),
        "",
        "## Charts",
        "",
        *figure_lines,
        "## Yearly Trend Model",
        "",
        describe_trend(trend),
        "",
        "## Highlights",
        f"- {busiest['name']} accounts for {busiest['share']:.1%} of victims ({busiest['records']:,}).",
        f"- Peak hour: {hourly_peak['hour']:02d}:00 with {hourly_peak['incidents']:,} incidents; "
        f"quietest hour is {hourly_peak['min_hour']:02d}:00 ({hourly_peak['min_incidents']:,}).",
        f"- {monthly_peak['month']} is the busiest month ({monthly_peak['incidents']:,} incidents), "
        f"{monthly_peak['min_month']} the quietest ({monthly_peak['min_incidents']:,}).",
        f"- {yearly['max_year']} had the most incidents ({yearly['max_incidents']:,}), "
        f"{yearly['min_year']} the fewest ({yearly['min_incidents']:,}).",
        "",
    ]
    return "\n".join(md_lines)


def save_json(payload: Dict[str, object], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))
    log.info("Metrics written to %s", path)
