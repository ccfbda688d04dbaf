# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pytest

from sheet_snapshot.logging.init import reset_logging
from sheet_snapshot.models.config_models import SheetDescriptor


@pytest.fixture(autouse=True)
def _clean_logging() -> Iterator[None]:
    # the app logger binds sys.stdout when created; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Iterator[Path]:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "public").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("GOOGLE_SHEET_ID", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_sheet_id: sheet-abc
schema_version: "2.0"
timezone: UTC
output_path: public/report-data.json
primary_key: location_database_name
fetch:
  strategy: csv_export
  timeout_seconds: 5
  max_workers: 4
sheets:
  - key: locations
    name: Locations Metadata
    gid: "1263377552"
  - key: yearly_funding
    name: Yearly Funding Data
    gid: 1426194263
  - key: top_rounds
    name: Top Rounds
display:
  map_enabled: false
  share_preview_enabled: true
  default_location_id: london
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheets.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


LOCATIONS_CSV = (
    "location_database_name,Display Name,Population\r\n"
    "london,London,\"8,800,000\"\r\n"
    "paris,Paris,2100000\r\n"
    ",Orphan row,1\r\n"
    ",,\r\n"
)

FUNDING_CSV = (
    "location_database_name,year,amount_usd\n"
    "london,2023,100\n"
    "london,2024,\"120\"\n"
)

ROUNDS_CSV = (
    "location_database_name,company,note\n"
    "paris,\"Acme, Inc.\",\"line one\nline two\"\n"
)


@pytest.fixture()
def sheet_csv() -> dict[str, str]:
    """CSV bodies keyed by how the sheet is addressed (gid or display name)."""
    return {
        "1263377552": LOCATIONS_CSV,
        "1426194263": FUNDING_CSV,
        "Top Rounds": ROUNDS_CSV,
    }


class FakeTransport:
    """``fetch(url) -> (status, text)`` double serving canned bodies.

    Bodies are looked up by the ``gid`` query parameter, else by ``sheet``.
    ``failures`` maps the same lookup key to a (status, body) pair or an
    exception instance to raise.
    """

    def __init__(self, bodies: dict[str, str], failures: dict[str, object] | None = None) -> None:
        self.bodies = bodies
        self.failures = failures or {}
        self.urls: list[str] = []

    @staticmethod
    def lookup_key(url: str) -> str:
        query = parse_qs(urlparse(url).query)
        if "gid" in query:
            return query["gid"][0]
        return query["sheet"][0]

    def __call__(self, url: str) -> tuple[int, str]:
        self.urls.append(url)
        key = self.lookup_key(url)
        failure = self.failures.get(key)
        if isinstance(failure, BaseException):
            raise failure
        if failure is not None:
            return failure  # type: ignore[return-value]
        if key not in self.bodies:
            return 404, "<!DOCTYPE html><html><body>Not Found</body></html>"
        return 200, self.bodies[key]


@pytest.fixture()
def fake_transport(sheet_csv: dict[str, str]) -> FakeTransport:
    return FakeTransport(dict(sheet_csv))


@pytest.fixture()
def make_transport(sheet_csv: dict[str, str]) -> Callable[..., FakeTransport]:
    def _make(failures: dict[str, object] | None = None, bodies: dict[str, str] | None = None) -> FakeTransport:
        return FakeTransport(dict(bodies if bodies is not None else sheet_csv), failures)
    return _make


@pytest.fixture()
def locations_sheet() -> SheetDescriptor:
    return SheetDescriptor(
        key="locations",
        name="Locations Metadata",
        primary_key="location_database_name",
        gid="1263377552",
    )
