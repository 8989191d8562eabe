"""Command-line interface for litdedupe.

Provides CLI commands for duplicate detection and duplicate-graph checks.
"""

import importlib.metadata
import json
import sys
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("litdedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


@click.group()
@click.version_option(version=__version__, prog_name="litdedupe")
def cli() -> None:
    """Duplicate detection for literature-review records.

    Use 'litdedupe COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the JSON result here instead of stdout",
)
@click.option(
    "--threshold",
    type=float,
    default=0.85,
    show_default=True,
    help="Rule-based similarity threshold in [0, 1]",
)
@click.option(
    "--method",
    type=click.Choice(["rule_based", "judgment_assisted", "hybrid"]),
    default="hybrid",
    show_default=True,
    help="Detection strategy",
)
@click.option(
    "--transitive",
    is_flag=True,
    help="Group connected components instead of the single greedy pass",
)
@click.option(
    "--auto-merge",
    is_flag=True,
    help="Mark duplicates and write the updated records back to INPUT_PATH",
)
@click.option(
    "--no-judgment",
    is_flag=True,
    help="Never call the judgment service (assisted strategies fall back to rules)",
)
@click.option(
    "--events",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def detect(
    input_path: str,
    output: str | None,
    threshold: float,
    method: str,
    transitive: bool,
    auto_merge: bool,
    no_judgment: bool,
    events: str | None,
    verbose: bool,
) -> None:
    """Detect duplicate records in INPUT_PATH.

    INPUT_PATH is a JSONL file with one record per line. Records that are
    already marked as duplicates are skipped.

    The judgment service is configured from OPENAI_API_KEY (plus optional
    OPENAI_BASE_URL, LITDEDUPE_JUDGMENT_MODEL, LITDEDUPE_JUDGMENT_TIMEOUT).
    Without a key the assisted strategies fall back to rule-based grouping.

    Examples
    --------
        litdedupe detect records.jsonl
        litdedupe detect records.jsonl --method rule_based --threshold 0.8
        litdedupe detect records.jsonl --auto-merge --events events.jsonl
    """
    from litdedupe.audit import AuditLogger, generate_run_id
    from litdedupe.engine import DetectionConfig
    from litdedupe.engine import detect as run_detection
    from litdedupe.judgment import OpenAIJudgmentService
    from litdedupe.merge import JsonlRecordStore

    logger = None

    try:
        config = DetectionConfig(
            threshold=threshold,
            method=method,
            clustering="transitive" if transitive else "greedy",
        )

        store = JsonlRecordStore.load(input_path)
        records = store.unmarked()

        service = None if no_judgment else OpenAIJudgmentService.from_env()

        if verbose:
            click.echo(f"Loaded {len(store)} records ({len(records)} unmarked)", err=True)
            click.echo(f"  Method: {config.method}", err=True)
            click.echo(f"  Threshold: {config.threshold}", err=True)
            click.echo(f"  Clustering: {config.clustering}", err=True)
            click.echo(
                f"  Judgment service: {type(service).__name__ if service else 'none'}",
                err=True,
            )

        if events:
            logger = AuditLogger(generate_run_id(), Path(events))

        result = run_detection(
            records,
            auto_merge=auto_merge,
            config=config,
            judgment_service=service,
            store=store,
            logger=logger,
        )

        if auto_merge:
            store.save()
            if verbose:
                click.echo(f"Marked {result.merged_count} duplicates in {input_path}", err=True)

        payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        if output:
            Path(output).write_text(payload + "\n", encoding="utf-8")
            click.secho(
                f"✓ Found {len(result.duplicate_groups)} groups "
                f"({result.total_duplicates} duplicates), wrote {output}",
                fg="green",
            )
        else:
            click.echo(payload)

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)

    finally:
        if logger is not None:
            logger.close()


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
def check(input_path: str) -> None:
    """Check that duplicate pointers in INPUT_PATH form a depth-one forest.

    Exits with status 1 when any record points at itself, at another
    duplicate, or into a loop.

    Examples
    --------
        litdedupe check records.jsonl
    """
    from litdedupe.merge import JsonlRecordStore, find_forest_violations

    try:
        records = JsonlRecordStore.load(input_path).records()
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    violations = find_forest_violations(records)

    if not violations:
        click.secho(f"✓ No duplicate-pointer violations in {len(records)} records", fg="green")
        return

    for violation in violations:
        click.echo(
            f"{violation.record_id}: {violation.kind} (duplicateOf={violation.duplicate_of})",
            err=True,
        )
    click.secho(f"✗ {len(violations)} violation(s) found", fg="red", err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
