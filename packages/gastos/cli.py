"""CLI for the ``gastos`` package.

``gastos [INPUT_DIR]`` imports every OFX file under ``INPUT_DIR`` (default
``./ofxs``), asks for the category of each transaction no rule matches, and
rewrites the monthly spreadsheet (default ``gastos.xlsx``). Environment
variables are loaded from a local ``.env`` (without overriding the real
environment) before options fall back to them. Business logic lives in
``gastos.workflows.import_flow``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from .db.client import dispose_engines
from .errors import GastosError
from .logging_setup import configure_logging

DONE_MESSAGE = "✔ importação concluída"


def cmd_import(
    input_dir: Path | None = None,
    *,
    output: Path | None = None,
    database_url: str | None = None,
    workers: int | None = None,
) -> int:
    """Run an import and return the process exit status.

    Exit status is ``0`` on success and ``1`` when the store cannot be
    opened, the spreadsheet cannot be backed up or saved, or any insert
    failed during the run. Errors are reported on stderr as one line.
    """

    # Local imports keep ``--help`` fast
    from .settings import ImportSettings
    from .workflows.import_flow import run_import

    try:
        settings = ImportSettings.resolve(
            input_dir=input_dir,
            output=output,
            database_url=database_url,
            workers=workers,
        )
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    try:
        report = run_import(settings, echo=typer.echo)
    except GastosError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        dispose_engines()

    if not report.ok:
        print(
            f"Error: {report.store_failures} database insert(s) failed; see log output.",
            file=sys.stderr,
        )
        return 1

    typer.echo(DONE_MESSAGE)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    add_completion=False,
    help=(
        "Import credit-card transactions from OFX files, classify them with "
        "keyword rules and export a monthly spreadsheet."
    ),
)


@app.command()
def import_cmd(
    input_dir: Annotated[
        Path, typer.Argument(help="Directory searched recursively for *.ofx files.")
    ] = Path("./ofxs"),
    *,
    output: Path = typer.Option(Path("gastos.xlsx"), help="Spreadsheet to (re)write."),
    database_url: str | None = typer.Option(
        None, help="Override GASTOS_DATABASE_URL (default sqlite:///finance.db)."
    ),
    workers: int | None = typer.Option(
        None, min=1, help="Parser threads (default GASTOS_WORKERS, else CPU count)."
    ),
    log_level: str | None = typer.Option(
        None, help="Log level for stderr diagnostics (default GASTOS_LOG_LEVEL or WARNING)."
    ),
) -> None:
    """Import OFX statements and export the monthly spreadsheet."""

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    code = cmd_import(input_dir, output=output, database_url=database_url, workers=workers)
    if code:
        raise typer.Exit(code)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m gastos.cli`
    app()
