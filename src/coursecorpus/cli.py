"""coursecorpus CLI - deduplicate and order a lesson corpus."""

import json
import logging
from pathlib import Path

import click
import yaml

from coursecorpus.config.hash import config_to_yaml, load_config
from coursecorpus.config.schema import LoaderConfig
from coursecorpus.errors import ConfigError, CorpusRootError
from coursecorpus.logging import RunLogger, setup_logging
from coursecorpus.pipeline.loader import load_corpus
from coursecorpus.report.markdown import render_markdown
from coursecorpus.report.reporter import CorpusReport


def _build_config(config_path: str | None, threshold: float | None, workers: int | None,
                  timeout: float | None) -> LoaderConfig:
    config = load_config(config_path) if config_path else LoaderConfig()
    data = config.to_dict()
    if threshold is not None:
        data["dedup"]["threshold"] = threshold
    if workers is not None:
        data["reader"]["num_workers"] = workers
        data["dedup"]["num_workers"] = workers
    if timeout is not None:
        data["dedup"]["timeout_seconds"] = timeout
    return LoaderConfig.from_dict(data)


def _format_report(report: CorpusReport, fmt: str) -> str:
    if fmt == "markdown":
        return render_markdown(report)
    if fmt == "yaml":
        return yaml.safe_dump(report.to_dict(), sort_keys=False, default_flow_style=False)
    return json.dumps(report.to_dict(), indent=2)


def _run(root: str, config_path: str | None, index: tuple[str, ...], threshold: float | None,
         workers: int | None, timeout: float | None, log_dir: str | None) -> CorpusReport:
    try:
        config = _build_config(config_path, threshold, workers, timeout)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="--config") from e

    run_logger = RunLogger(run_dir=log_dir) if log_dir else None
    try:
        return load_corpus(
            root,
            config=config,
            index_files=list(index) if index else None,
            run_logger=run_logger,
        )
    except CorpusRootError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(package_name="coursecorpus")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """coursecorpus: deduplicate and order course lesson documents."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    setup_logging(level)


@main.command()
@click.argument("root", type=click.Path(file_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Loader config YAML")
@click.option("--index", "-i", multiple=True, help="Index file declaring lesson order (repeatable, processed in order)")
@click.option("--threshold", "-t", type=click.FloatRange(0.0, 1.0), help="Near-duplicate similarity threshold")
@click.option("--workers", "-w", type=click.IntRange(min=1), help="Worker threads for reading and comparison")
@click.option("--timeout", type=click.FloatRange(min=0.0), help="Seconds allowed for pair comparison")
@click.option("--format", "-f", "fmt", type=click.Choice(["json", "yaml", "markdown"]), default="json",
              show_default=True, help="Report format")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write report here instead of stdout")
@click.option("--log-dir", type=click.Path(file_okay=False), help="Directory for structured run events")
def load(root: str, config_path: str | None, index: tuple[str, ...], threshold: float | None,
         workers: int | None, timeout: float | None, fmt: str, output: str | None, log_dir: str | None) -> None:
    """Load a corpus and print its ordered, deduplicated report."""
    report = _run(root, config_path, index, threshold, workers, timeout, log_dir)
    text = _format_report(report, fmt)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Report written to {output}")
    else:
        click.echo(text)


@main.command()
@click.argument("root", type=click.Path(file_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Loader config YAML")
@click.option("--threshold", "-t", type=click.FloatRange(0.0, 1.0), help="Near-duplicate similarity threshold")
def duplicates(root: str, config_path: str | None, threshold: float | None) -> None:
    """List duplicate clusters found under ROOT."""
    report = _run(root, config_path, (), threshold, None, None, None)
    if not report.clusters:
        click.echo("No duplicates found.")
        return
    for cluster in report.clusters:
        click.echo(f"{cluster.canonical_id} (kept)")
        for member in cluster.duplicates:
            click.echo(f"  {member}  {cluster.similarity_scores.get(member, 0.0):.3f}")
    click.echo(f"{report.duplicates_removed} duplicate(s) across {len(report.clusters)} cluster(s)")


@main.command("config")
def show_config() -> None:
    """Print the default loader configuration as YAML."""
    click.echo(config_to_yaml(LoaderConfig()), nl=False)


if __name__ == "__main__":
    main()
