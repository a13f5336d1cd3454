from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

RAW_COLUMNS = [
    "INCIDENT_KEY",
    "OCCUR_DATE",
    "OCCUR_TIME",
    "BORO",
    "LOC_OF_OCCUR_DESC",
    "PRECINCT",
    "STATISTICAL_MURDER_FLAG",
    "PERP_AGE_GROUP",
    "VIC_AGE_GROUP",
    "VIC_SEX",
    "Latitude",
    "Longitude",
]


def make_raw(rows):
    records = []
    for key, date, time, boro, lat, lon in rows:
        records.append(
            {
                "INCIDENT_KEY": key,
                "OCCUR_DATE": date,
                "OCCUR_TIME": time,
                "BORO": boro,
                "LOC_OF_OCCUR_DESC": "OUTSIDE",
                "PRECINCT": 44,
                "STATISTICAL_MURDER_FLAG": False,
                "PERP_AGE_GROUP": "18-24",
                "VIC_AGE_GROUP": "25-44",
                "VIC_SEX": "M",
                "Latitude": lat,
                "Longitude": lon,
            }
        )
    return pd.DataFrame(records, columns=RAW_COLUMNS)


@pytest.fixture
def raw_df() -> pd.DataFrame:
    return make_raw(
        [
            (101, "01/15/2019", "23:10:00", "BRONX", 40.84, -73.90),
            (101, "01/15/2019", "23:10:00", "BRONX", 40.84, -73.90),
            (102, "04/02/2019", "14:30:00", "BROOKLYN", 40.65, -73.95),
            (103, "07/04/2019", "01:45:00", "BROOKLYN", 40.66, -73.94),
            (104, "10/31/2019", "20:00:00", "MANHATTAN", 40.80, -73.94),
            (105, "02/20/2020", "02:15:00", "QUEENS", 40.70, -73.80),
            (106, "05/18/2020", "22:05:00", "BRONX", 40.85, -73.88),
            (107, "07/19/2020", "00:30:00", "BROOKLYN", None, None),
            (107, "07/19/2020", "00:30:00", "BROOKLYN", None, None),
            (108, "08/01/2020", "03:00:00", "STATEN ISLAND", 40.60, -74.10),
            (109, "12/24/2020", "18:40:00", "MANHATTAN", 40.81, -73.95),
            (110, "03/03/2021", "11:20:00", "BRONX", 40.83, -73.91),
            (111, "06/21/2021", "21:55:00", "BROOKLYN", 40.67, -73.92),
            (112, "09/09/2021", "04:10:00", "QUEENS", 40.71, -73.79),
        ]
    )


@pytest.fixture
def scenario_raw() -> pd.DataFrame:
    return make_raw(
        [
            ("A", "01/15/2020", "10:00:00", "BRONX", 40.84, -73.90),
            ("B", "06/20/2020", "11:00:00", "BROOKLYN", 40.65, -73.95),
            ("A", "06/21/2021", "12:00:00", "BRONX", 40.84, -73.90),
        ]
    )
