"""Google Sheets -> JSON snapshot builder.

Fetches every configured sheet of a spreadsheet as CSV, normalizes the rows into
header-keyed records and writes one versioned snapshot document.
"""

__version__ = "0.1.0"
