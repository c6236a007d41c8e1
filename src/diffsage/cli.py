"""Command-line interface for diffsage."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from diffsage import __version__
from diffsage.config import (
    ProjectConfig,
    find_config_root,
    load_config,
    resolve_api_key,
    save_config,
    set_config_value,
)
from diffsage.exceptions import ConfigError
from diffsage.ui.console import Console

console = Console()


def _load(path: str | None = None) -> tuple[Path | None, ProjectConfig]:
    root = Path(path).resolve() if path else find_config_root()
    try:
        return root, load_config(root)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="diffsage")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """diffsage - analyze git diffs for library side effects with an LLM."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--path", "-p", default=None, help="Directory to create .diffsage/ in.")
@click.option("--provider", default=None, help="LLM provider (openai, anthropic, local).")
@click.option("--model", default=None, help="Primary model name.")
@click.option("--fallback-model", default=None, help="Fallback model name.")
def init(
    path: str | None, provider: str | None, model: str | None, fallback_model: str | None
):
    """Write a default configuration file."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    _, config = _load(str(root))
    if provider:
        config.llm.provider = provider
    if model:
        config.llm.model = model
    if fallback_model:
        config.llm.fallback_model = fallback_model

    config_path = save_config(root, config)
    console.success(f"Configuration saved to {config_path}")


@main.command()
@click.option("--project", "-p", required=True, help="Project name.")
@click.option("--from-tag", "-f", default=None, help="Older tag of the range.")
@click.option("--to-tag", "-t", default=None, help="Newer tag of the range.")
@click.option("--commit", "-c", default=None, help="Analyze a single commit instead.")
@click.option(
    "--path", "repo_path", default=None,
    help="Repository path (default: <repositories_dir>/<project>).",
)
@click.option("--reports-dir", default=None, help="Where to write the diff and summary.")
@click.option("--model", default=None, help="Override the primary model.")
@click.option("--dry-run", is_flag=True, help="Filter and save the diff without calling the LLM.")
def analyze(
    project: str,
    from_tag: str | None,
    to_tag: str | None,
    commit: str | None,
    repo_path: str | None,
    reports_dir: str | None,
    model: str | None,
    dry_run: bool,
):
    """Analyze the changes between two tags, or of a single commit.

    Examples:

        diffsage analyze -p mylib -f v1.2.0 -t v1.3.0

        diffsage analyze -p mylib -c 3f2a9e1 --path ../mylib
    """
    if commit and (from_tag or to_tag):
        raise click.UsageError(
            "--commit cannot be combined with --from-tag/--to-tag."
        )
    if not commit and not (from_tag and to_tag):
        raise click.UsageError(
            "Tag range analysis needs both --from-tag and --to-tag; "
            "use --commit for a single commit."
        )

    from diffsage.analysis.orchestrator import AnalysisOrchestrator, AnalysisState
    from diffsage.analysis.prompts import AnalysisIdentity
    from diffsage.budget.tokens import TokenEstimator
    from diffsage.budget.truncator import compute_stats, split_lines
    from diffsage.diff.filter import DiffFilter
    from diffsage.diff.path_filter import PathFilter
    from diffsage.diff.source import read_commit_diff, read_range_diff
    from diffsage.exceptions import DiffSageError
    from diffsage.llm.factory import create_provider
    from diffsage.reports import report_paths, save_report

    console.banner()
    _, config = _load()
    if model:
        config.llm.model = model

    api_key = None
    if not dry_run and config.llm.provider != "local":
        try:
            api_key = resolve_api_key(config.llm)
        except ConfigError as e:
            console.error(str(e))
            sys.exit(1)

    repo = Path(repo_path) if repo_path else Path(config.output.repositories_dir) / project
    identity = (
        AnalysisIdentity.for_commit(project, commit)
        if commit
        else AnalysisIdentity.for_range(project, from_tag, to_tag)
    )
    diff_filter = DiffFilter(PathFilter.with_extra(config.filter.extra_exclude_patterns))

    console.info(f"Project: {project} ({repo})")
    console.info(f"Target: {identity.range_label}")

    try:
        if identity.is_commit:
            raw = read_commit_diff(
                repo, commit, use_pathspecs=config.filter.use_git_pathspecs
            )
        else:
            raw = read_range_diff(
                repo, from_tag, to_tag, use_pathspecs=config.filter.use_git_pathspecs
            )
    except DiffSageError as e:
        console.error(str(e))
        sys.exit(1)

    doc = diff_filter.split(raw)
    diff = diff_filter.render(doc)

    if not diff.strip():
        if identity.is_commit:
            console.warning("The commit has no changes.")
        else:
            console.warning("No changes between the two tags.")
        return

    paths = report_paths(Path(reports_dir or config.output.reports_dir), identity)
    save_report(paths.diff, diff)
    console.success(f"Diff saved to {paths.diff}")

    console.show_diff_stats(
        doc,
        compute_stats(split_lines(diff)),
        TokenEstimator.estimate(diff),
    )

    if dry_run:
        return

    def on_request(state: AnalysisState, request, content_tokens: int) -> None:
        if state is AnalysisState.FALLBACK:
            console.warning(
                f"Primary model hit its context limit, retrying with {request.model}..."
            )
        else:
            console.info(f"Analyzing with {request.model} (~{content_tokens:,} content tokens)...")

    try:
        provider = create_provider(config.llm, api_key)
        orchestrator = AnalysisOrchestrator(provider, config.llm, on_request=on_request)
        result = asyncio.run(orchestrator.analyze(diff, identity))
    except (DiffSageError, ValueError) as e:
        console.error(str(e))
        sys.exit(1)

    save_report(paths.summary, result.text)
    console.show_result(result)
    console.markdown(result.text)
    console.success("Analysis complete")
    console.info(f"Diff file: {paths.diff}")
    console.info(f"Summary file: {paths.summary}")


@main.command("filter")
@click.argument("diff_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--budget", "-b", type=int, default=None, help="Truncate to this many tokens.")
@click.option("--exclude", "-e", multiple=True, help="Extra path pattern to exclude.")
def filter_cmd(diff_file, budget: int | None, exclude: tuple[str, ...]):
    """Filter a diff file (or stdin) and print the result.

    Example:

        git diff v1.0 v1.1 | diffsage filter --budget 6000
    """
    from diffsage.budget.truncator import BudgetTruncator
    from diffsage.diff.filter import DiffFilter
    from diffsage.diff.path_filter import PathFilter

    _, config = _load()
    patterns = [*config.filter.extra_exclude_patterns, *exclude]
    text = DiffFilter(PathFilter.with_extra(patterns)).filter(diff_file.read())
    if budget is not None:
        text = BudgetTruncator().truncate(text, budget)
    click.echo(text, nl=not text.endswith("\n"))


@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Directory holding .diffsage/.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage diffsage configuration."""
    root, config = _load(path)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: diffsage config get <key>")
            sys.exit(1)
        data = config.model_dump()
        parts = key.split(".")
        for part in parts:
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: diffsage config set <key> <value>")
            sys.exit(1)
        if root is None:
            console.error("No .diffsage directory found. Run 'diffsage init' first.")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)


if __name__ == "__main__":
    main()
