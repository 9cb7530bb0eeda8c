from __future__ import annotations

import sys
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional

import typer
from rich.console import Console

from roster.config import get_settings
from roster.domain.models import Submission, SubmitStatus
from roster.infrastructure.storage import StorageError
from roster.projector import project
from roster.reporter import print_projection
from roster.store import RecordStore
from roster.utils.logging import configure_logging

app = typer.Typer(help="Student roster CLI.", no_args_is_help=True)


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except StorageError as exc:
        typer.echo(f"Storage error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _open_store() -> RecordStore:
    return RecordStore.open(get_settings())


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    location = settings.data_file
    if settings.storage_backend == "postgres":
        location = (
            f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
            f" table={settings.db_table}"
        )
    typer.echo(
        f"backend={settings.storage_backend} ({location}) | key={settings.storage_namespace} | "
        f"ids={settings.id_prefix}{'0' * (settings.id_width - 1)}1"
    )


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", help="Student name (letters and spaces)."),
    contact: str = typer.Option(..., "--contact", "-c", help="11 digit mobile number."),
    section: str = typer.Option(..., "--section", "-s", help="Section label."),
    salary: str = typer.Option(..., "--salary", help="Salary, 0 or more."),
    join_date: Optional[str] = typer.Option(
        None, "--join-date", "-d", help="Joining date (default: today)."
    ),
) -> None:
    """
    Add a new student record.
    """
    submission = Submission(
        name=name,
        contact=contact,
        section=section,
        salary=salary,
        join_date=join_date if join_date is not None else date.today().isoformat(),
    )
    with _storage_errors():
        outcome = _open_store().submit(submission)
    if outcome.status is SubmitStatus.REJECTED:
        typer.echo(outcome.error, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Added {outcome.record.id}.")


@app.command()
def edit(
    identifier: str = typer.Argument(..., help="Identifier of the record to edit."),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    contact: Optional[str] = typer.Option(None, "--contact", "-c"),
    section: Optional[str] = typer.Option(None, "--section", "-s"),
    salary: Optional[str] = typer.Option(None, "--salary"),
    join_date: Optional[str] = typer.Option(None, "--join-date", "-d"),
) -> None:
    """
    Update fields of an existing record; omitted options keep their value.
    """
    changes = {
        "name": name,
        "contact": contact,
        "section": section,
        "salary": salary,
        "join_date": join_date,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    with _storage_errors():
        store = _open_store()
        current = store.begin_edit(identifier)
        if current is None:
            typer.echo(f"No record with id {identifier}.", err=True)
            raise typer.Exit(code=1)
        if not changes:
            store.cancel_edit()
            typer.echo("Nothing to change.")
            return
        outcome = store.submit(Submission(**{**current, **changes}))

    if outcome.status is SubmitStatus.REJECTED:
        typer.echo(outcome.error, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Updated {identifier}.")


@app.command()
def delete(
    identifier: str = typer.Argument(..., help="Identifier of the record to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete a record after confirmation.
    """
    with _storage_errors():
        store = _open_store()
        if store.get(identifier) is None:
            typer.echo(f"No record with id {identifier}.", err=True)
            raise typer.Exit(code=1)
        confirmed = yes or typer.confirm(f"Delete record {identifier}?", default=False)
        if not store.remove(identifier, confirmed=confirmed):
            typer.echo("Cancelled.")
            return
    typer.echo(f"Deleted {identifier}.")


@app.command("list")
def list_records(
    search: str = typer.Option("", "--search", "-q", help="Match name or contact (case-insensitive)."),
    section: str = typer.Option("", "--section", "-s", help="Only this section."),
) -> None:
    """
    Show records matching the filters, with totals.
    """
    with _storage_errors():
        store = _open_store()
    print_projection(project(store.records, search, section), console=Console())


@app.command()
def sections() -> None:
    """
    List the distinct sections in use.
    """
    with _storage_errors():
        store = _open_store()
    for name in project(store.records).distinct_sections:
        typer.echo(name)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
