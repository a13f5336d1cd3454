from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import pandas as pd

from . import plots
from .aggregate import count_by_borough, count_by_hour, count_incidents
from .cleaning import clean_dataframe, with_derived_columns
from .config import DEFAULT_OUTPUT_DIR, DEFAULT_SOURCE_URL, ReportConfig
from .errors import ReportError
from .loader import load_raw_data
from .report import (
    build_report_markdown,
    compute_insights,
    compute_quality_metrics,
    save_json,
    summarize_schema,
)
from .trend import TrendFit, fit_yearly_trend

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportArtifacts:
    report_path: Path
    metrics_path: Path
    figures: Dict[str, Path]
    trend: TrendFit


def run_eda_outputs(
    featured: pd.DataFrame,
    borough_counts: pd.DataFrame,
    monthly: pd.DataFrame,
    trend: TrendFit,
    figures_dir: Path,
) -> Dict[str, Path]:
    plots.configure_matplotlib()
    return {
        "borough_map": plots.plot_borough_map(featured, figures_dir),
        "borough_counts": plots.plot_borough_counts(borough_counts, figures_dir),
        "hour_histogram": plots.plot_hour_histogram(featured, figures_dir),
        "seasonal_hour_grid": plots.plot_seasonal_hour_grid(featured, figures_dir),
        "monthly_incidents": plots.plot_monthly_incidents(monthly, figures_dir),
        "yearly_trend": plots.plot_yearly_trend(trend, figures_dir),
    }


def run_pipeline(config: ReportConfig) -> ReportArtifacts:
    raw_df = load_raw_data(
        config.source,
        limit=config.limit,
        cache_path=config.cache_path,
        timeout=config.timeout,
    )
    raw_profile = summarize_schema(
        raw_df, n_rows=config.preview_rows, n_columns=config.preview_columns
    )
    clean_df = clean_dataframe(raw_df)
    clean_profile = summarize_schema(clean_df, n_rows=config.preview_rows)
    featured_df = with_derived_columns(clean_df)

    monthly = count_incidents(featured_df, "month")
    yearly = count_incidents(featured_df, "year")
    hourly = count_by_hour(featured_df)
    borough_counts = count_by_borough(featured_df)
    trend = fit_yearly_trend(yearly)

    figures = run_eda_outputs(featured_df, borough_counts, monthly, trend, config.figures_dir)
    metrics = compute_quality_metrics(clean_df)
    insights = compute_insights(hourly, monthly, yearly, borough_counts)
    payload = metrics | {
        "figures": {name: str(path) for name, path in figures.items()},
        "insights": insights,
        "trend": trend.as_dict(),
        "schema": {"raw": raw_profile, "clean": clean_profile},
    }
    save_json(payload, config.metrics_path)

    summary = build_report_markdown(
        raw_profile,
        clean_profile,
        metrics,
        insights,
        trend,
        figures,
        config.output_dir,
    )
    config.report_path.parent.mkdir(parents=True, exist_ok=True)
    config.report_path.write_text(summary, encoding="utf-8")
    log.info("Report written to %s", config.report_path)
    return ReportArtifacts(
        report_path=config.report_path,
        metrics_path=config.metrics_path,
        figures=figures,
        trend=trend,
    )


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Build the NYPD shooting incidents exploratory report."
    )
    parser.add_argument(
        "--source",
        default=DEFAULT_SOURCE_URL,
        help="CSV URL or local path (defaults to the NYC Open Data export).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for the report, metrics and figures.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Optional row limit for debugging.",
    )
    parser.add_argument(
        "--cache",
        type=Path,
        default=None,
        help="Keep the downloaded CSV here and reuse it on later runs.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = ReportConfig(
        source=args.source,
        output_dir=args.output_dir,
        limit=args.limit,
        cache_path=args.cache,
    )
    try:
        artifacts = run_pipeline(config)
    except ReportError as exc:
        log.error("Report generation failed: %s", exc)
        return 1
    log.info("Done: %s", artifacts.report_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
