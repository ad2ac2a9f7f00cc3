"""Command line interface entry point."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

import click

from sample_build_checker.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    HarnessSettings,
    load_configuration,
)
from sample_build_checker.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_sample_build_run,
)
from sample_build_checker.unit_discovery import NoUnitsFoundError

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="sample-build-checker")
@click.option(
    "--root",
    "samples_root",
    required=False,
    type=click.Path(path_type=str),
    help="Directory scanned for samples  [default: samples]",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help=f"Path to a YAML settings file  [default: {DEFAULT_CONFIG_FILENAME} if present]",
)
@click.option(
    "--jobs",
    type=click.IntRange(min=1),
    help="Number of samples built in parallel; 1 builds them one after another.",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.IntRange(min=1),
    help="Per-command timeout in seconds.",
)
@click.option(
    "--results-dir",
    type=click.Path(path_type=str),
    help="Directory for per-sample outcome files.",
)
@click.option(
    "--aggregate-only",
    is_flag=True,
    default=False,
    help="Skip building and report the outcomes recorded in --results-dir.",
)
@click.option(
    "--skip-root-install",
    is_flag=True,
    default=False,
    help="Do not install repository-root dependencies before building.",
)
@click.option(
    "--report-output",
    type=click.Path(path_type=str),
    help="Optional path for a results workbook (.xlsx).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log commands and output.")
@click.pass_context
def cli(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    *,
    samples_root: str | None,
    config_path: str | None,
    jobs: int | None,
    timeout_seconds: int | None,
    results_dir: str | None,
    aggregate_only: bool,
    skip_root_install: bool,
    report_output: str | None,
    verbose: bool,
) -> None:
    """Install, build or type-check every sample project and report the results."""
    _configure_logging(verbose)
    try:
        settings = _resolve_settings(
            config_path=config_path,
            samples_root=samples_root,
            jobs=jobs,
            timeout_seconds=timeout_seconds,
            results_dir=results_dir,
            skip_root_install=skip_root_install,
        )
        outcome = execute_sample_build_run(
            RunRequest(
                settings=settings,
                aggregate_only=aggregate_only,
                report_output=Path(report_output) if report_output else None,
            ),
            echo=click.echo,
        )
    except NoUnitsFoundError as exc:
        raise CliError("❌ No samples found!") from exc
    except (ConfigurationError, RunExecutionError, OSError) as exc:
        raise CliError(str(exc)) from exc

    if outcome.report_path is not None:
        click.echo(f"📄 Results workbook: {outcome.report_path}")
    ctx.exit(outcome.exit_code)


def _resolve_settings(
    *,
    config_path: str | None,
    samples_root: str | None,
    jobs: int | None,
    timeout_seconds: int | None,
    results_dir: str | None,
    skip_root_install: bool,
) -> HarnessSettings:
    """Load the settings file and apply command line overrides on top."""
    resolved_config = config_path
    if resolved_config is None and Path(DEFAULT_CONFIG_FILENAME).is_file():
        resolved_config = DEFAULT_CONFIG_FILENAME
    settings = load_configuration(resolved_config)

    execution = dataclasses.replace(
        settings.execution,
        parallelism=jobs if jobs is not None else settings.execution.parallelism,
        timeout_seconds=(
            timeout_seconds if timeout_seconds is not None else settings.execution.timeout_seconds
        ),
    )
    return dataclasses.replace(
        settings,
        samples_root=Path(samples_root).resolve() if samples_root else settings.samples_root,
        results_dir=Path(results_dir).resolve() if results_dir else settings.results_dir,
        root_install=settings.root_install and not skip_root_install,
        execution=execution,
    )


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    package_logger = logging.getLogger("sample_build_checker")
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        exit_code = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return exit_code if isinstance(exit_code, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
