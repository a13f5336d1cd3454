from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .errors import InsufficientDataError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendFit:
    """Ordinary least squares line ``incidents ~ intercept + slope * year``."""

    intercept: float
    slope: float
    intercept_se: float
    slope_se: float
    r_squared: float
    n_obs: int
    predictions: pd.DataFrame = field(repr=False)

    @property
    def first_year(self) -> int:
        return int(self.predictions["year"].min())

    @property
    def last_year(self) -> int:
        return int(self.predictions["year"].max())

    def predict(self, years: Iterable[int]) -> np.ndarray:
        values = np.asarray(list(years), dtype=float)
        outside = (values < self.first_year) | (values > self.last_year)
        if outside.any():
            raise ValueError(
                f"Years {values[outside].astype(int).tolist()} fall outside the fitted range "
                f"{self.first_year}-{self.last_year}"
            )
        return self.intercept + self.slope * values

    def as_dict(self) -> Dict[str, object]:
        return {
            "intercept": round(self.intercept, 4),
            "slope": round(self.slope, 4),
            "intercept_se": round(self.intercept_se, 4),
            "slope_se": round(self.slope_se, 4),
            "r_squared": round(self.r_squared, 4),
            "n_obs": self.n_obs,
            "years": [self.first_year, self.last_year],
        }


def fit_yearly_trend(yearly: pd.DataFrame) -> TrendFit:
    if yearly["year"].nunique() < 2:
        raise InsufficientDataError(
            f"A trend line needs at least two distinct years, got {yearly['year'].nunique()}"
        )
    ordered = yearly.sort_values("year").reset_index(drop=True)
    x = sm.add_constant(ordered["year"].astype(float))
    y = ordered["incidents"].astype(float)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = sm.OLS(y, x).fit()
        bse = result.bse
        r_squared = float(result.rsquared)

    predictions = ordered[["year", "incidents"]].assign(predicted=result.fittedvalues.to_numpy())
    fit = TrendFit(
        intercept=float(result.params["const"]),
        slope=float(result.params["year"]),
        intercept_se=float(bse["const"]),
        slope_se=float(bse["year"]),
        r_squared=r_squared,
        n_obs=int(result.nobs),
        predictions=predictions,
    )
    log.info(
        "Yearly trend: %.1f incidents/year (se %.1f), R^2 %.3f over %s years",
        fit.slope,
        fit.slope_se,
        fit.r_squared,
        fit.n_obs,
    )
    return fit
