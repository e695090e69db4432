"""Storage helpers for exported results views (local paths or GCS).

Exported views are written through PyArrow's filesystem API, so the flow
and the CLI can target either a local directory or a `gs://` bucket
without branching.

Env-driven credentials (GCS only):
- GOOGLE_APPLICATION_CREDENTIALS: path to service account JSON
- GCS_SERVICE_ACCOUNT_JSON: inline JSON credentials (optional convenience)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import polars as pl
import pyarrow.parquet as pq
from pyarrow import fs as pafs

logger = logging.getLogger(__name__)


def is_gcs_uri(uri: str) -> bool:
    """Return True if `uri` looks like a GCS URI (prefixed with gs://)."""
    return isinstance(uri, str) and uri.strip().lower().startswith("gs://")


def partition_uri(root: str, view: str, dt: str, file_name: str) -> str:
    """Build `<root>/<view>/dt=<dt>/<file_name>` for local or GCS roots."""
    return f"{root.rstrip('/')}/{view}/dt={dt}/{file_name}"


def _ensure_local_dir_for_uri(uri: str) -> None:
    if not is_gcs_uri(uri):
        Path(uri).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def _maybe_stage_inline_gcs_key(tmp_dir: str | None = None) -> None:
    """Point GOOGLE_APPLICATION_CREDENTIALS at GCS_SERVICE_ACCOUNT_JSON if set."""
    key_json = os.environ.get("GCS_SERVICE_ACCOUNT_JSON")
    if not key_json:
        return
    try:
        parsed: dict[str, Any] = json.loads(key_json)
    except json.JSONDecodeError:
        logger.warning("GCS_SERVICE_ACCOUNT_JSON is not valid JSON; leaving credentials unset")
        return
    base = Path(tmp_dir or ".").resolve() / ".gcp"
    base.mkdir(parents=True, exist_ok=True)
    key_path = base / "sa_key.json"
    key_path.write_text(json.dumps(parsed))
    os.environ.setdefault("GOOGLE_APPLICATION_CREDENTIALS", key_path.as_posix())


def _filesystem_and_path(uri: str) -> tuple[pafs.FileSystem, str]:
    if is_gcs_uri(uri):
        _maybe_stage_inline_gcs_key()
        return pafs.FileSystem.from_uri(uri)
    return pafs.FileSystem.from_uri(Path(uri).expanduser().resolve().as_posix())


def write_parquet_any(frame: pl.DataFrame, dest_uri: str) -> str:
    """Write a Polars DataFrame to Parquet at `dest_uri`.

    Args:
        frame: View to write (its schema is kept even when empty)
        dest_uri: Local path or gs:// URI

    Returns:
        `dest_uri`

    """
    _ensure_local_dir_for_uri(dest_uri)
    filesystem, path = _filesystem_and_path(dest_uri)
    pq.write_table(frame.to_arrow(), path, filesystem=filesystem)
    return dest_uri


def write_text_sidecar(text: str, dest_uri: str) -> str:
    """Write a small UTF-8 text file (e.g. `_meta.json`) next to a view."""
    _ensure_local_dir_for_uri(dest_uri)
    filesystem, path = _filesystem_and_path(dest_uri)
    with filesystem.open_output_stream(path) as out:
        out.write(text.encode("utf-8"))
    return dest_uri


def read_parquet_any(src_uri: str, columns: Sequence[str] | None = None) -> pl.DataFrame:
    """Read an exported view back (local or GCS) as a Polars DataFrame."""
    filesystem, path = _filesystem_and_path(src_uri)
    table = pq.read_table(path, filesystem=filesystem, columns=columns)
    return pl.from_arrow(table)
