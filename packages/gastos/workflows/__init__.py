"""Workflow orchestrators composing ingest, resolution and export."""

from .import_flow import ImportReport, run_import

__all__ = ["ImportReport", "run_import"]
