from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib import pyplot as plt

from .aggregate import densify_months, with_month_labels
from .cleaning import SEASONS
from .errors import InsufficientDataError
from .trend import TrendFit

log = logging.getLogger(__name__)

HOUR_BINS = np.arange(0, 25)


def configure_matplotlib() -> None:
    sns.set_theme(style="whitegrid", context="notebook", palette="deep")
    plt.rcParams.update(
        {
            "axes.spines.right": False,
            "axes.spines.top": False,
            "axes.titleweight": "bold",
            "figure.facecolor": "white",
        }
    )


def _save(fig: plt.Figure, figures_dir: Path, filename: str) -> Path:
    figures_dir.mkdir(parents=True, exist_ok=True)
    path = figures_dir / filename
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    log.debug("Wrote figure %s", path)
    return path


def _require_rows(df: pd.DataFrame, what: str) -> None:
    if df.empty:
        raise InsufficientDataError(f"No incidents available for the {what}")


def plot_borough_map(df: pd.DataFrame, figures_dir: Path) -> Path:
    located = df.dropna(subset=["latitude", "longitude"])
    fig, ax = plt.subplots(figsize=(10, 10))
    sns.scatterplot(
        data=located,
        x="longitude",
        y="latitude",
        hue="borough",
        s=6,
        alpha=0.4,
        linewidth=0,
        ax=ax,
    )
    ax.set_title("Shooting Incidents by Location")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    if ax.get_legend() is not None:
        ax.legend(title="Borough", markerscale=3, loc="upper left")
    return _save(fig, figures_dir, "borough_map.png")


def plot_borough_counts(borough_counts: pd.DataFrame, figures_dir: Path) -> Path:
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(
        data=borough_counts,
        x="borough",
        y="records",
        color="#1F78B4",
        ax=ax,
    )
    ax.set_title("Shooting Victims by Borough")
    ax.set_xlabel("")
    ax.set_ylabel("Victims")
    return _save(fig, figures_dir, "borough_counts.png")


def plot_hour_histogram(df: pd.DataFrame, figures_dir: Path) -> Path:
    _require_rows(df, "time-of-day histogram")
    fig, ax = plt.subplots(figsize=(12, 5))
    ax.hist(df["hour"], bins=HOUR_BINS, color="#F1B434", edgecolor="white")
    ax.set_xticks(range(0, 24, 2))
    ax.set_xlim(0, 24)
    ax.set_title("Shootings by Hour of Day")
    ax.set_xlabel("Hour of Day")
    ax.set_ylabel("Victims")
    return _save(fig, figures_dir, "hour_histogram.png")


def plot_seasonal_hour_grid(df: pd.DataFrame, figures_dir: Path) -> Path:
    _require_rows(df, "seasonal time-of-day histograms")
    fig, axes = plt.subplots(2, 2, figsize=(14, 9), sharex=True, sharey=True)
    for ax, season in zip(axes.flat, SEASONS):
        hours = df.loc[df["season"] == season, "hour"]
        ax.hist(hours, bins=HOUR_BINS, color="#0B5ED7", edgecolor="white")
        ax.set_title(season)
        ax.set_xticks(range(0, 24, 4))
        ax.set_xlim(0, 24)
    for ax in axes[1]:
        ax.set_xlabel("Hour of Day")
    for ax in axes[:, 0]:
        ax.set_ylabel("Victims")
    fig.suptitle("Time of Day by Season")
    return _save(fig, figures_dir, "seasonal_hour_grid.png")


def plot_monthly_incidents(monthly: pd.DataFrame, figures_dir: Path) -> Path:
    labelled = with_month_labels(densify_months(monthly))
    fig, ax = plt.subplots(figsize=(12, 5))
    sns.barplot(data=labelled, x="label", y="incidents", color="#C43F3A", ax=ax)
    ax.set_title("Shooting Incidents by Month")
    ax.set_xlabel("")
    ax.set_ylabel("Incidents")
    return _save(fig, figures_dir, "monthly_incidents.png")


def plot_yearly_trend(trend: TrendFit, figures_dir: Path) -> Path:
    points = trend.predictions
    fig, ax = plt.subplots(figsize=(12, 6))
    ax.scatter(points["year"], points["incidents"], color="#0B1F3A", zorder=3, label="Observed")
    ax.plot(
        points["year"],
        points["predicted"],
        color="#C43F3A",
        linewidth=2,
        label=f"Linear fit ({trend.slope:+.1f}/year)",
    )
    ax.set_xticks(points["year"].tolist())
    ax.tick_params(axis="x", rotation=45)
    ax.set_title("Shooting Incidents per Year")
    ax.set_xlabel("Year")
    ax.set_ylabel("Incidents")
    ax.legend()
    return _save(fig, figures_dir, "yearly_trend.png")
