"""Exploratory report over the NYPD Shooting Incident (Historic) dataset."""

__version__ = "0.1.0"
