"""Write resolved results views as partitioned Parquet with `_meta.json` sidecars.

Layout (local or gs://):
    <out_dir>/<view>/dt=YYYY-MM-DD/<view>.parquet
    <out_dir>/<view>/dt=YYYY-MM-DD/_meta.json

Re-exporting the same date overwrites the partition, so a re-run for the
same snapshot leaves identical files behind.
"""

from __future__ import annotations

import json
from datetime import datetime

import polars as pl

from ingest.common.storage import partition_uri, write_parquet_any, write_text_sidecar
from ingest.results.registry import VIEWS


def write_view(frame: pl.DataFrame, view: str, out_dir: str, dt: str, metadata: dict) -> dict:
    """Write one view with its metadata sidecar.

    Args:
        frame: View to write
        view: View name (a key of `registry.VIEWS`)
        out_dir: Base output directory (local or GCS)
        dt: Date partition value (YYYY-MM-DD)
        metadata: Extra fields for the sidecar

    Returns:
        Dict with rows, path and metadata

    """
    parquet_uri = partition_uri(out_dir, view, dt, f"{view}.parquet")
    write_parquet_any(frame, parquet_uri)

    info = VIEWS.get(view, {})
    meta = {
        "dataset": view,
        "division": info.get("division"),
        "description": info.get("description"),
        "asof_datetime": datetime.now().isoformat(),
        "loader_path": "ingest.results.export",
        "source_name": "results_feed",
        "output_parquet": parquet_uri,
        "row_count": len(frame),
        "columns": frame.columns,
        **metadata,
    }
    write_text_sidecar(
        json.dumps(meta, indent=2, ensure_ascii=False),
        partition_uri(out_dir, view, dt, "_meta.json"),
    )
    return {"rows": len(frame), "path": parquet_uri, "meta": meta}


def write_views(views: dict[str, pl.DataFrame], out_dir: str, dt: str, metadata: dict) -> dict:
    """Write every view; returns a manifest keyed by view name."""
    manifest = {"loaded_at": datetime.now().isoformat(), "dt": dt, "datasets": {}}
    for view, frame in views.items():
        manifest["datasets"][view] = write_view(frame, view, out_dir, dt, metadata)
    return manifest
