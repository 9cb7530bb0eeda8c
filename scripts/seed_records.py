"""
Sample data generator for the student roster.

Creates deterministic pseudo-random student records through the record store,
so every generated record passes the same validation as manual entries and
receives a regular sequential identifier.
"""

from __future__ import annotations

import random
import sys
import time
from datetime import date, timedelta

import typer

from roster.config import get_settings
from roster.domain.models import Submission, SubmitStatus
from roster.store import RecordStore
from roster.utils.logging import configure_logging

app = typer.Typer(help="Generate sample student records into the configured store.")

FIRST_NAMES = ["Alif", "Bina", "Chayan", "Dipa", "Esha", "Farhan", "Gita", "Hasan", "Ira", "Jamil"]
LAST_NAMES = ["Rahman", "Akter", "Hossain", "Islam", "Das", "Chowdhury", "Sarkar"]
SECTIONS = ["A", "B", "C", "D"]


def _generate_submissions(count: int, seed: int) -> list[Submission]:
    rng = random.Random(seed)
    start = date(2020, 1, 1)
    submissions: list[Submission] = []
    for _ in range(count):
        joined = start + timedelta(days=rng.randint(0, 5 * 365))
        submissions.append(
            Submission(
                name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
                contact="01" + "".join(str(rng.randint(0, 9)) for _ in range(9)),
                section=rng.choice(SECTIONS),
                salary=str(rng.randrange(0, 50_001, 500)),
                join_date=joined.isoformat(),
            )
        )
    return submissions


@app.command()
def main(
    count: int = typer.Option(
        20,
        "--count",
        "-n",
        help="Number of records to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
) -> None:
    """
    Generate sample records and add them to the configured store.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    start = time.perf_counter()
    store = RecordStore.open(settings)

    created = 0
    for submission in _generate_submissions(count, seed):
        outcome = store.submit(submission)
        if outcome.status is SubmitStatus.CREATED:
            created += 1
        else:
            typer.echo(f"Skipped sample record: {outcome.error}", err=True)

    duration = time.perf_counter() - start
    typer.echo(f"Created {created} records in {duration:.2f}s; store now holds {len(store)}.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
