from __future__ import annotations

import io
import logging
from pathlib import Path

import pandas as pd
import requests

from .config import DEFAULT_TIMEOUT
from .errors import ParseError, RetrievalError

log = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_csv(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Download ``url`` once and return the body as text.

    Any transport failure or non-2xx status is reported as ``RetrievalError``.
    """
    log.info("Downloading %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise RetrievalError(f"Could not retrieve {url}: {exc}") from exc
    log.info("Downloaded %s bytes", f"{len(response.content):,}")
    return response.text


def parse_csv(text: str, limit: int | None = None) -> pd.DataFrame:
    try:
        df = pd.read_csv(io.StringIO(text), nrows=limit)
    except pd.errors.EmptyDataError as exc:
        raise ParseError("CSV content is empty") from exc
    except pd.errors.ParserError as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc
    if df.columns.empty:
        raise ParseError("CSV has no header row")
    return df


def read_local_csv(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"{path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise RetrievalError(f"Could not read {path}: {exc}") from exc


def load_raw_data(
    source: str,
    limit: int | None = None,
    cache_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> pd.DataFrame:
    if cache_path is not None and Path(cache_path).exists():
        log.info("Reading cached download %s", cache_path)
        text = read_local_csv(Path(cache_path))
    elif is_url(source):
        text = fetch_csv(source, timeout=timeout)
        if cache_path is not None:
            cache_path = Path(cache_path)
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(text, encoding="utf-8")
            log.info("Cached download to %s", cache_path)
    else:
        path = Path(source)
        if not path.exists():
            raise RetrievalError(f"Source file not found: {path}")
        text = read_local_csv(path)

    df = parse_csv(text, limit=limit)
    log.info("Loaded raw table: %s rows x %s columns", f"{len(df):,}", df.shape[1])
    return df
