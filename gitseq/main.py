"""
gitseq — CLI entrypoint.

Usage:
    python -m gitseq --help
    python -m gitseq run <repository> <output-dir> [start-commit]
    python -m gitseq config show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from gitseq import __version__
from gitseq.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="gitseq")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to gitseq.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """gitseq — enumerate every commit sequence of a git history."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


@cli.command()
@click.argument("repository", type=click.Path(path_type=Path))
@click.argument("output_dir", type=click.Path(path_type=Path))
@click.argument("start_commit", required=False, default=None)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    repository: Path,
    output_dir: Path,
    start_commit: str | None,
    as_json: bool,
) -> None:
    """Write one file per commit sequence, plus a summary.

    START_COMMIT defaults to the repository's HEAD. OUTPUT_DIR must
    exist and be empty.

    Examples:

        gitseq run ./repo ./out

        gitseq run ./repo ./out 2a79fe77210128198ae05d3731b8693c75fb75e0
    """
    from gitseq.core.use_cases.sequence import run_sequencing

    result = run_sequencing(
        repository=repository,
        output_dir=output_dir,
        start_commit=start_commit,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None  # guaranteed after error check above
    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        click.secho(f"\n🌿 {report.repository}", fg="cyan", bold=True)
        click.echo(f"   Start commit: {report.start_commit}")
        click.echo(f"   Output: {report.output_dir}")
        click.echo()

    if ctx.obj.get("verbose"):
        for seq in report.sequences:
            if seq.ok:
                click.secho(f"   ✓ {seq.name}", fg="green", nl=False)
            elif seq.status == "truncated":
                click.secho(f"   ⊘ {seq.name}", fg="yellow", nl=False)
            else:
                click.secho(f"   ✗ {seq.name}", fg="red", nl=False)
            click.echo(f"  {seq.commit_count} commits")
            if seq.error:
                click.echo(f"     │ {seq.error}")
        click.echo()

    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    click.secho(
        f"   Commit sequences created: {report.total}",
        fg=status_color,
        bold=True,
    )
    if not quiet:
        shortest, longest = report.shortest, report.longest
        if shortest and longest:
            click.echo(f"   Shortest: {shortest.name} ({shortest.commit_count} commits)")
            click.echo(f"   Longest:  {longest.name} ({longest.commit_count} commits)")
        click.echo(f"   Summary: {report.summary_path}")
        click.echo(f"   Duration: {report.duration_ms / 1000:.1f}s")

    if report.failed or report.truncated:
        click.secho(
            f"   ⚠️  {report.failed} failed, {report.truncated} truncated",
            fg="yellow",
        )

    click.echo()
    if report.status != "ok":
        sys.exit(1)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective configuration."""
    from gitseq.core.config.loader import ConfigError, find_config_file, load_config

    config_path: Path | None = ctx.obj.get("config_path")
    try:
        settings = load_config(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    source = config_path or find_config_file()

    if as_json:
        click.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        return

    click.secho("⚙️  Configuration", fg="cyan", bold=True)
    click.echo(f"   Source: {source if source else 'defaults'}")
    for key, value in settings.model_dump().items():
        click.echo(f"   {key}: {value}")
    click.echo()


if __name__ == "__main__":
    cli()
