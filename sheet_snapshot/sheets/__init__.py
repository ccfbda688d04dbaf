"""Sheet acquisition and normalization: transport, sources, tokenizer, records."""

from .fetcher import CsvExportSource, MalformedResponseError, SheetFetchError, SheetSource, build_source
from .reader import SheetData, filter_records, map_records, normalize_sheet
from .tokenizer import tokenize_rows
from .transport import HttpTransport, TransportError

__all__ = [
    "CsvExportSource",
    "HttpTransport",
    "MalformedResponseError",
    "SheetData",
    "SheetFetchError",
    "SheetSource",
    "TransportError",
    "build_source",
    "filter_records",
    "map_records",
    "normalize_sheet",
    "tokenize_rows",
]
