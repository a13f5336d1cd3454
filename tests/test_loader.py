from __future__ import annotations

import pandas as pd
import pytest
import requests

from nypd_shootings import loader
from nypd_shootings.errors import ParseError, RetrievalError

CSV_TEXT = (
    "INCIDENT_KEY,OCCUR_DATE,OCCUR_TIME,BORO,Latitude,Longitude\n"
    "1,01/15/2020,10:00:00,BRONX,40.84,-73.90\n"
    "2,06/20/2020,11:30:00,BROOKLYN,40.65,-73.95\n"
)


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.content = text.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_load_raw_data_from_url_infers_types(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return FakeResponse(CSV_TEXT)

    monkeypatch.setattr(loader.requests, "get", fake_get)
    df = loader.load_raw_data("https://example.org/shootings.csv")

    assert calls == ["https://example.org/shootings.csv"]
    assert list(df.columns) == ["INCIDENT_KEY", "OCCUR_DATE", "OCCUR_TIME", "BORO", "Latitude", "Longitude"]
    assert pd.api.types.is_integer_dtype(df["INCIDENT_KEY"])
    assert pd.api.types.is_float_dtype(df["Latitude"])
    assert df["BORO"].tolist() == ["BRONX", "BROOKLYN"]


def test_non_success_status_raises_retrieval_error(monkeypatch):
    monkeypatch.setattr(loader.requests, "get", lambda url, timeout: FakeResponse("", 404))
    with pytest.raises(RetrievalError):
        loader.fetch_csv("https://example.org/missing.csv")


def test_network_failure_raises_retrieval_error(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(loader.requests, "get", fake_get)
    with pytest.raises(RetrievalError):
        loader.load_raw_data("https://example.org/shootings.csv")


def test_empty_content_raises_parse_error():
    with pytest.raises(ParseError):
        loader.parse_csv("")


def test_malformed_rows_raise_parse_error():
    with pytest.raises(ParseError):
        loader.parse_csv('a,b\n1,2\n3,"4\n')


def test_limit_restricts_rows():
    assert len(loader.parse_csv(CSV_TEXT, limit=1)) == 1


def test_cache_is_written_then_reused(monkeypatch, tmp_path):
    cache = tmp_path / "raw" / "shootings.csv"
    monkeypatch.setattr(loader.requests, "get", lambda url, timeout: FakeResponse(CSV_TEXT))
    first = loader.load_raw_data("https://example.org/shootings.csv", cache_path=cache)
    assert cache.read_text(encoding="utf-8") == CSV_TEXT

    def fail_get(url, timeout):
        raise AssertionError("cache should have been used")

    monkeypatch.setattr(loader.requests, "get", fail_get)
    second = loader.load_raw_data("https://example.org/shootings.csv", cache_path=cache)
    pd.testing.assert_frame_equal(first, second)


def test_missing_local_file_raises_retrieval_error(tmp_path):
    with pytest.raises(RetrievalError):
        loader.load_raw_data(str(tmp_path / "nope.csv"))


def test_non_utf8_local_file_raises_parse_error(tmp_path):
    path = tmp_path / "latin.csv"
    path.write_bytes(b"INCIDENT_KEY,OCCUR_DATE\n1,\xff\xfe01/01/2020\n")
    with pytest.raises(ParseError, match="UTF-8"):
        loader.load_raw_data(str(path))


def test_non_utf8_cache_raises_parse_error(tmp_path):
    cache = tmp_path / "cache.csv"
    cache.write_bytes(b"\xff\xfe")
    with pytest.raises(ParseError):
        loader.load_raw_data("https://example.org/shootings.csv", cache_path=cache)


def test_unreadable_source_raises_retrieval_error(tmp_path):
    with pytest.raises(RetrievalError):
        loader.read_local_csv(tmp_path)
