from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from relflow import __version__
from relflow.core.config import CONFIG_FILENAME, Config, load_config
from relflow.core.errors import ErrorCode, error_code_for
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, RichConsole, Style
from relflow.workflow.engine import run_workflow

from .context import CLIContext, build_step_context

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Run release workflows declared in relflow.toml.",
)


def _exit(message: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=int(code))


def _load(config_path: Path | None) -> CLIContext:
    path = config_path or Path.cwd() / CONFIG_FILENAME
    loaded = load_config(path)
    if isinstance(loaded, Err):
        _exit(loaded.error.pretty(), code=ErrorCode.CONFIG_ERROR)
    return CLIContext(root=path.resolve().parent, config=loaded.value, console=RichConsole())


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the config file (default: ./{CONFIG_FILENAME}).",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    ctx.obj = config


@app.command("list")
def list_workflows(ctx: typer.Context) -> None:
    """List the workflows defined in the config file."""
    cli = _load(ctx.obj)
    _print_workflows(cli.config, cli.console)


def _print_workflows(config: Config, console: ConsoleProtocol) -> None:
    if not config.workflows:
        console.warning("no workflows defined")
        return
    for wf in config.workflows:
        steps = ", ".join(step.name for step in wf.steps) or "(no steps)"
        console.print(wf.name, Style.DEFAULT)
        console.print(f"  {steps}", Style.DIM)


@app.command()
def run(
    ctx: typer.Context,
    workflow: str = typer.Argument(..., help="Name of the workflow to run."),
) -> None:
    """Run a workflow step by step, stopping at the first failure."""
    cli = _load(ctx.obj)
    selected = cli.config.workflow(workflow)
    if selected is None:
        available = ", ".join(cli.config.workflow_names) or "none"
        _exit(f"unknown workflow {workflow!r} (available: {available})", code=ErrorCode.USER_ERROR)

    step_ctx = build_step_context(root=cli.root, config=cli.config, console=cli.console)
    result = run_workflow(selected, step_ctx)
    if isinstance(result, Err):
        aborted = result.error
        head, *causes = aborted.chain()
        cli.console.error(head)
        for depth, line in enumerate(causes, start=1):
            indent = "  " * depth
            cli.console.print(f"{indent}{line}", Style.ERROR)
        raise typer.Exit(code=int(error_code_for(aborted.failure.cause.kind)))

    cli.console.success(f"workflow {workflow!r} completed")


def main() -> None:
    app()
