"""Main CLI interface for orgchart."""

import json
import logging
from typing import Dict, Hashable, Optional, Set

import click
from sqlalchemy.orm import Session

from orgchart.closure import ClosureError, ClosureLimits
from orgchart.database import create_tables, get_engine
from orgchart.loader import load_anchors_csv
from orgchart.logging import setup_logging
from orgchart.partitions import compute_partitions
from orgchart.services.subordinates import (
    subordinates_for_companies,
    subordinates_for_company,
    subordinates_via_sql,
)


def format_groups(groups: Dict[Hashable, Set[Hashable]]) -> dict:
    """Turn boss -> subordinates sets into JSON-ready data with sorted lists."""
    return {str(boss): sorted(members) for boss, members in sorted(groups.items())}


def build_limits(
    max_iterations: Optional[int], max_pairs: Optional[int], timeout: Optional[float]
) -> ClosureLimits:
    """Command line limits override the ORGCHART_* environment defaults."""
    defaults = ClosureLimits.from_env()
    return ClosureLimits(
        max_iterations=max_iterations
        if max_iterations is not None
        else defaults.max_iterations,
        max_pairs=max_pairs if max_pairs is not None else defaults.max_pairs,
        timeout=timeout if timeout is not None else defaults.timeout,
    )


def limit_options(func):
    """Attach the shared --max-iterations/--max-pairs/--timeout options."""
    func = click.option(
        "--timeout",
        type=float,
        default=None,
        help="Abort a computation after this many seconds",
    )(func)
    func = click.option(
        "--max-pairs",
        type=int,
        default=None,
        help="Abort when a closure grows beyond this many pairs",
    )(func)
    func = click.option(
        "--max-iterations",
        type=int,
        default=None,
        help="Abort after this many expansion rounds",
    )(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(verbose):
    """orgchart CLI - Resolve every boss's direct and indirect subordinates."""
    setup_logging()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command("create-tables")
def create_tables_command():
    """Create the companies and employees tables."""
    try:
        create_tables(get_engine())
        click.echo("✅ Tables created")
    except Exception as e:
        click.echo(f"❌ Failed to create tables: {e}")
        raise SystemExit(1)


@main.command("subordinates")
@click.option(
    "--company",
    "company_id",
    type=int,
    default=None,
    help="Company id; every company when omitted",
)
@click.option(
    "--sql",
    "use_sql",
    is_flag=True,
    help="Compute with a recursive query instead of in memory",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Worker processes when computing several companies (default: CPU count)",
)
@limit_options
def subordinates_command(company_id, use_sql, workers, max_iterations, max_pairs, timeout):
    """Print every boss's subordinates from the database as JSON."""
    try:
        limits = build_limits(max_iterations, max_pairs, timeout)
        with Session(get_engine()) as session:
            if company_id is not None:
                if use_sql:
                    groups = subordinates_via_sql(session, company_id)
                else:
                    groups = subordinates_for_company(session, company_id, limits)
                output = format_groups(groups)
            elif use_sql:
                click.echo("❌ --sql requires --company")
                raise SystemExit(1)
            else:
                results = subordinates_for_companies(
                    session, limits=limits, workers=workers
                )
                output = {
                    str(key): format_groups(groups)
                    for key, groups in sorted(results.items())
                }
    except (ValueError, ClosureError) as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)
    except Exception as e:
        click.echo(f"❌ Failed to compute subordinates: {e}")
        raise SystemExit(1)

    click.echo(json.dumps(output, indent=2))


@main.command("closure")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Worker processes when the file holds several companies",
)
@limit_options
def closure_command(file, workers, max_iterations, max_pairs, timeout):
    """Print subordinates for an id,parent_id[,company_id] CSV file as JSON."""
    try:
        limits = build_limits(max_iterations, max_pairs, timeout)
        partitions = load_anchors_csv(file)
        results = compute_partitions(partitions, limits, workers)
    except (ValueError, ClosureError) as e:
        click.echo(f"❌ {e}")
        raise SystemExit(1)

    if set(results) <= {""}:
        output = format_groups(results.get("", {}))
    else:
        output = {key: format_groups(groups) for key, groups in sorted(results.items())}

    click.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
