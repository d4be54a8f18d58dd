"""rosterpipe CLI for running roster pipelines - Tyro implementation."""

import logging
import shutil
import sys
from pathlib import Path
from typing import Annotated, Literal

import attrs
import tyro
from rich import print
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rosterpipe.calculator import OPERATIONS, SYMBOLS, operate_binary
from rosterpipe.config import CONFIG_FILENAME, RosterPipeConfig, discover_config_dir, get_config
from rosterpipe.utils import get_templates_dir


# Subcommand definitions using attrs
@attrs.define
class Demo:
    """Run the numbered search approaches against the demonstration roster."""

    approach: Annotated[int | None, tyro.conf.Positional] = None
    """Approach number (1-9). Runs all approaches when omitted."""


@attrs.define
class ListPipelines:
    """List the configured pipelines."""


@attrs.define
class Run:
    """Run a configured pipeline against the demonstration roster."""

    name: Annotated[str, tyro.conf.Positional]
    """Pipeline name from rosterpipe.yaml."""


Operation = Literal["add", "subtract", "multiply"]


@attrs.define
class Calc:
    """Apply a two-operand integer operation."""

    a: Annotated[int, tyro.conf.Positional]
    """Left operand."""

    b: Annotated[int, tyro.conf.Positional]
    """Right operand."""

    op: Annotated[Operation, tyro.conf.arg(aliases=["-o"])] = "add"
    """Operation to apply."""


@attrs.define
class Install:
    """Install rosterpipe configuration files."""

    force: bool = False
    """Overwrite existing configuration."""


Command = (
    Annotated[Demo, tyro.conf.subcommand(name="demo")]
    | Annotated[ListPipelines, tyro.conf.subcommand(name="list")]
    | Annotated[Run, tyro.conf.subcommand(name="run")]
    | Annotated[Calc, tyro.conf.subcommand(name="calc")]
    | Annotated[Install, tyro.conf.subcommand(name="install")]
)


def setup_logging(debug: bool = False) -> None:
    """Configure logging with 100-character text width."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)-20s - %(levelname)-8s - %(message).100s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(config_dir: Path) -> RosterPipeConfig:
    """Load rosterpipe.yaml from config_dir (defaults when missing or malformed)."""
    return get_config(config_dir)


def install_config(config_dir: Path, force: bool = False) -> None:
    """Install rosterpipe configuration files.

    Args:
        config_dir: Directory to install configuration files to
        force: Whether to overwrite existing configuration
    """
    target = config_dir / CONFIG_FILENAME
    if target.exists() and not force:
        print(f"[yellow]Configuration already exists at {target}[/yellow]", file=sys.stderr)
        print("Use --force to overwrite", file=sys.stderr)
        sys.exit(1)

    config_dir.mkdir(parents=True, exist_ok=True)
    template = get_templates_dir() / CONFIG_FILENAME
    if not template.exists():
        print(f"[red]Error: template not found at {template}[/red]", file=sys.stderr)
        sys.exit(1)

    shutil.copy2(template, target)
    print(f"Installed {CONFIG_FILENAME} to {target}")


def run_demos(approach: int | None) -> None:
    """Run one approach, or all of them in order."""
    from rosterpipe.criteria import DEMOS, run_demo

    if approach is not None and approach not in DEMOS:
        print(f"[red]Error: no approach {approach} (choose 1-{len(DEMOS)})[/red]", file=sys.stderr)
        sys.exit(1)

    numbers = [approach] if approach is not None else list(DEMOS)
    console = Console()
    for number in numbers:
        title, _ = DEMOS[number]
        console.print(f"\n[bold cyan]Approach {number}:[/bold cyan] {title}")
        run_demo(number)


def list_pipelines(config_dir: Path) -> None:
    """Show configured pipelines as a table."""
    config = load_config(config_dir)
    if not config.pipelines:
        print(f"[yellow]No pipelines configured in {config.config_path}[/yellow]")
        print("Run 'rosterpipe install' to create a default configuration")
        return

    console = Console()
    console.print(Panel("[bold cyan]Configured Pipelines[/bold cyan]", expand=False))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Pipeline", style="cyan")
    table.add_column("Selector", style="green")
    table.add_column("Transform", style="yellow")
    table.add_column("Sink", style="magenta")
    table.add_column("Description")

    for entry in config.pipelines:
        table.add_row(
            entry.name,
            entry.selector,
            entry.transform or "-",
            entry.sink or "-",
            entry.description or "-",
        )

    console.print(table)


def run_pipeline(config_dir: Path, name: str) -> None:
    """Run one configured pipeline over the demonstration roster."""
    from rosterpipe.pipeline import PipelineRunner
    from rosterpipe.roster import create_roster

    config = load_config(config_dir)
    specs = config.load_pipelines()

    runner = PipelineRunner(specs)
    if name not in runner.names():
        known = ", ".join(runner.names()) or "none"
        print(f"[red]Error: unknown pipeline '{name}' (known: {known})[/red]", file=sys.stderr)
        sys.exit(1)

    try:
        stats = runner.run(name, create_roster())
    except Exception as e:
        print(f"[red]Pipeline '{name}' failed: {type(e).__name__}: {e}[/red]", file=sys.stderr)
        for note in getattr(e, "__notes__", []):
            print(f"  {note}", file=sys.stderr)
        sys.exit(1)

    print(f"[dim]{stats.accepted} of {stats.visited} members matched[/dim]")


def calculate(a: int, b: int, op: str) -> None:
    """Print the result of a two-operand operation."""
    result = operate_binary(a, b, OPERATIONS[op])
    print(f"{a} {SYMBOLS[op]} {b} = {result}")


def main(
    cmd: Annotated[Command, tyro.conf.arg(name="")],
    *,
    config_dir: Annotated[Path | None, tyro.conf.arg(help="Configuration directory")] = None,
    debug: bool = False,
) -> None:
    """rosterpipe - select, transform and consume roster members.

    Demonstrates progressively more general ways of filtering and acting on
    a collection, ending in a generic lazy pipeline.
    """
    if config_dir is None:
        config_dir = discover_config_dir()

    # install and calc never read the configuration
    if isinstance(cmd, (Install, Calc)):
        setup_logging(debug)
    else:
        setup_logging(debug or load_config(config_dir).debug)

    # Handle each command type
    if isinstance(cmd, Demo):
        run_demos(cmd.approach)

    elif isinstance(cmd, ListPipelines):
        list_pipelines(config_dir)

    elif isinstance(cmd, Run):
        run_pipeline(config_dir, cmd.name)

    elif isinstance(cmd, Calc):
        calculate(cmd.a, cmd.b, cmd.op)

    elif isinstance(cmd, Install):
        install_config(config_dir, force=cmd.force)


def entry_point() -> None:
    """Entry point for the rosterpipe command."""
    tyro.cli(main)


if __name__ == "__main__":
    entry_point()
