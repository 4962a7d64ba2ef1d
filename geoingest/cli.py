#!/usr/bin/env python3
"""Command-line interface for the geodata ingestion pipeline.

Modes:
  - geoingest ingest-and-load : fetch every category, snapshot and load (additive)
  - geoingest load-existing   : load previously written snapshots only
  - geoingest fresh-ingest    : delete pending records, then ingest and load

Exit codes: 0 on success, 1 on a fatal error, 2 on a usage error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Dict

from pydantic import ValidationError

from geoingest.configs.config import Config
from geoingest.configs.settings import Settings, get_settings
from geoingest.ingestion.adapters import OverpassAdapter, OverpassAdapterConfig
from geoingest.ingestion.datastore import PostgresDatastore
from geoingest.ingestion.errors import IngestionError
from geoingest.ingestion.loader import BatchLoader
from geoingest.ingestion.orchestrator import RunOrchestrator
from geoingest.ingestion.reporting import render_report, report_to_dict
from geoingest.ingestion.snapshot import SnapshotStore
from geoingest.ingestion.stats import RunMode, RunReport
from geoingest.logging_config import setup_logging

logger = logging.getLogger("geoingest.cli")

ENTRY_POINTS: Dict[RunMode, Callable[[RunOrchestrator], RunReport]] = {
    RunMode.INGEST_AND_LOAD: RunOrchestrator.ingest_and_load,
    RunMode.LOAD_EXISTING: RunOrchestrator.load_existing,
    RunMode.FRESH_INGEST: RunOrchestrator.fresh_ingest,
}


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="geoingest",
        description="Ingest OSM geodata into the destination catalogue",
    )
    p.add_argument(
        "mode",
        choices=[m.value for m in RunMode],
        help="ingest-and-load | load-existing | fresh-ingest",
    )
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL",
    )
    p.add_argument(
        "--report-format",
        default="text",
        choices=["text", "json"],
        help="Format of the final statistics report on stdout",
    )
    return p.parse_args(argv)


def build_source(settings: Settings) -> OverpassAdapter:
    return OverpassAdapter(
        OverpassAdapterConfig(
            source_id="overpass",
            endpoint=settings.OVERPASS_URL,
            request_timeout=settings.SOURCE_TIMEOUT_SECONDS,
        )
    )


def run(mode: RunMode, settings: Settings, *, datastore=None, source=None) -> RunReport:
    """
    Wire the pipeline from settings and execute one mode.

    Raises:
        ConfigurationError: Unreadable area file or unwritable output directory
        DatastoreConnectionError: The datastore could not be reached
    """
    area = Config.load_area(settings.INGESTION_CONFIG_PATH)
    snapshots = SnapshotStore(settings.OUTPUT_DIR)
    snapshots.ensure_writable()

    datastore = datastore or PostgresDatastore(settings)
    with source or build_source(settings) as src:
        orchestrator = RunOrchestrator(
            settings,
            datastore,
            src,
            snapshots,
            loader=BatchLoader(settings.BATCH_SIZE),
            area=area,
        )
        return ENTRY_POINTS[mode](orchestrator)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    args = _parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or settings.LOG_LEVEL, args.json_logs or settings.JSON_LOGS)

    try:
        report = run(RunMode(args.mode), settings)
    except IngestionError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception:
        logger.exception("Run aborted by an unexpected error")
        return 1

    if args.report_format == "json":
        print(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
    else:
        print(render_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
