"""Snapshot file output."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ..models.snapshot import SnapshotDocument

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """Raised when the snapshot cannot be serialized or written."""


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_snapshot(document: SnapshotDocument, path: Path) -> int:
    """Serialize ``document`` and write it to ``path`` atomically.

    The payload is parsed back before the file is replaced so a consumer never
    sees invalid JSON. Parent directories are created as needed.

    Returns:
        Number of bytes written
    """
    try:
        payload = document.to_json()
        json.loads(payload)
    except ValueError as e:
        raise OutputError(f"snapshot is not valid JSON: {e}") from e

    data = payload.encode("utf-8")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                # mkstemp creates 0600; publish with the usual umask-derived mode
                os.fchmod(f.fileno(), 0o666 & ~_current_umask())
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise OutputError(f"cannot write snapshot to {path}: {e}") from e

    logger.debug("wrote %d bytes to %s", len(data), path)
    return len(data)
