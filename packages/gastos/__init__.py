"""Public interface for the ``gastos`` package.

Import OFX credit-card statements, classify transactions with keyword rules
learned over time, and export a spreadsheet with one sheet per month. This
module only re-exports the stable entry points.
"""

from .classifier import RuleBook
from .export import backup_spreadsheet, export_spreadsheet, write_spreadsheet
from .models import DEFAULT_RULES, Rule, Transaction, first_word, normalize_description
from .persistence import Persister, open_store
from .pipeline import IngestResult, ingest
from .resolver import ResolveResult, resolve_unknowns
from .settings import ImportSettings
from .workflows.import_flow import ImportReport, run_import

__all__ = [
    # Workflow
    "ImportReport",
    "ImportSettings",
    "run_import",
    # Pipeline stages
    "IngestResult",
    "Persister",
    "ResolveResult",
    "RuleBook",
    "backup_spreadsheet",
    "export_spreadsheet",
    "ingest",
    "open_store",
    "resolve_unknowns",
    "write_spreadsheet",
    # Models
    "DEFAULT_RULES",
    "Rule",
    "Transaction",
    "first_word",
    "normalize_description",
]
