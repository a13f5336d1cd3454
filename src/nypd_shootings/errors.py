from __future__ import annotations


class ReportError(Exception):
    """Base class for failures that abort report generation."""


class RetrievalError(ReportError):
    """The source CSV could not be fetched."""


class ParseError(ReportError):
    """The source content, or one of its fields, is malformed."""


class InsufficientDataError(ReportError):
    """Not enough observations for a fit or a bucketing step."""
