#!/usr/bin/env python3
"""Colour Sort puzzle tools.

Usage::

    python main.py generate medium -n 5 --pack daily     # generate and store levels
    python main.py pack Ocean Forest -l 20               # themed packs, 20 levels each
    python main.py check --pack daily                    # batch QA of a stored pack
    python main.py solve daily_003                       # optimal solution of a level
    python main.py hint daily_003                        # first move of that solution
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from colorsort.config import DEFAULT_POLICY, GenerationPolicy, load_policy
from colorsort.engine.gamegenerator import GameGenerator
from colorsort.engine.gamesolver import Solver
from colorsort.engine.gamestate import PuzzleState
from colorsort.engine.gametester import LevelTester
from colorsort.errors import SortPuzzleError
from colorsort.logs import configure_logging
from colorsort.models import ColorToken, Level, LevelStore, Tier

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

console = Console()

_TOKEN_STYLES: dict[ColorToken, str] = {
    ColorToken.RED: "red",
    ColorToken.BLUE: "blue",
    ColorToken.GREEN: "green",
    ColorToken.YELLOW: "yellow",
    ColorToken.PURPLE: "purple",
    ColorToken.ORANGE: "orange1",
    ColorToken.PINK: "pink1",
    ColorToken.CYAN: "cyan",
    ColorToken.BROWN: "orange4",
    ColorToken.LIME: "chartreuse1",
    ColorToken.MAGENTA: "magenta",
    ColorToken.TEAL: "dark_cyan",
}


@dataclass
class _Options:
    policy: GenerationPolicy
    store_path: Path


# -- helpers ------------------------------------------------------------------


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(code=1)


def _render_level(level: Level) -> Table:
    """Return a Rich Table with one row per vessel, bottom token first."""
    table = Table(title=f"{level.name}  [dim]({level.tier.display_name})[/dim]")
    table.add_column("Vessel", style="bold")
    table.add_column("Contents")
    table.add_column("Fill", justify="right")
    for vessel in level.vessels:
        contents = Text()
        for token in vessel.units:
            contents.append("■ ", style=_TOKEN_STYLES[token])
        contents.append("· " * vessel.available_space, style="dim")
        table.add_row(vessel.id, contents, f"{len(vessel.units)}/{vessel.capacity}")
    return table


def _levels_table(levels: list[Level]) -> Table:
    table = Table(title="Levels")
    table.add_column("Id")
    table.add_column("Tier")
    table.add_column("Vessels", justify="right")
    table.add_column("Optimal", justify="right")
    table.add_column("Budget", justify="right")
    table.add_column("Stars (3/2/1)", justify="right")
    for level in levels:
        table.add_row(
            level.id,
            level.tier.display_name,
            str(level.vessel_count),
            str(level.optimal_moves),
            str(level.move_budget),
            "/".join(str(t) for t in level.star_thresholds),
        )
    return table


def _progress() -> Progress:
    return Progress(
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )


def _find_level(store: LevelStore, level_id: str) -> Level:
    level = store.get_level(level_id)
    if level is None:
        console.print(f"[bold red]Error:[/bold red] no level {level_id!r} in {store.filepath}")
        raise typer.Exit(code=1)
    return level


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log solver and generator details.",
    ),
    policy: Optional[Path] = typer.Option(
        None, "--policy",
        exists=True, dir_okay=False,
        help="JSON file overriding tier, bounds and scoring parameters.",
    ),
    store: Path = typer.Option(
        DATA_DIR / "levels.json", "--store",
        help="Level store file.",
    ),
) -> None:
    """Colour Sort puzzle tools."""
    configure_logging(verbose=verbose)
    try:
        loaded = load_policy(policy) if policy is not None else DEFAULT_POLICY
    except (ValueError, TypeError, KeyError) as exc:
        _fail(exc)
    ctx.obj = _Options(policy=loaded, store_path=store)


@app.command()
def generate(
    ctx: typer.Context,
    tier: Tier = typer.Argument(..., help="Difficulty tier."),
    count: int = typer.Option(1, "-n", "--count", min=1, help="Number of levels."),
    start: int = typer.Option(1, "--start", min=1, help="First level number."),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Explicit seed (single level only). Derived from the slot otherwise.",
    ),
    pack: Optional[str] = typer.Option(
        None, "--pack",
        help="Store the levels under this pack name.",
    ),
    show: bool = typer.Option(False, "--show", help="Draw every generated level."),
) -> None:
    """Generate validated levels for one tier."""
    opts: _Options = ctx.obj
    if seed is not None and count != 1:
        console.print("[bold red]Error:[/bold red] --seed only applies to a single level")
        raise typer.Exit(code=1)

    try:
        if seed is not None:
            _, level = GameGenerator.generate(tier, start, seed, policy=opts.policy, theme=pack)
            levels = [level]
        else:
            with _progress() as progress:
                task = progress.add_task(f"Generating {tier}", total=count)
                levels = GameGenerator.generate_levels(
                    tier, count, start=start, theme=pack, policy=opts.policy,
                    on_progress=lambda done, _total: progress.update(task, completed=done),
                )
    except (SortPuzzleError, ValueError) as exc:
        _fail(exc)

    console.print(_levels_table(levels))
    if show:
        for level in levels:
            console.print(_render_level(level))

    if pack is not None:
        store = LevelStore(opts.store_path)
        for level in levels:
            store.add_level(pack, level)
        console.print(f"[green]Saved {len(levels)} level(s) to pack {pack!r}.[/green]")


@app.command(name="pack")
def pack_cmd(
    ctx: typer.Context,
    themes: List[str] = typer.Argument(..., help="Theme names, one pack each."),
    levels_per_theme: int = typer.Option(
        50, "-l", "--levels",
        min=1,
        help="Levels per themed pack.",
    ),
) -> None:
    """Generate themed packs (easy to expert) and store them."""
    opts: _Options = ctx.obj
    try:
        with _progress() as progress:
            tasks = {
                theme: progress.add_task(theme, total=levels_per_theme) for theme in themes
            }
            packs = GameGenerator.generate_pack(
                themes, levels_per_theme, policy=opts.policy,
                on_progress=lambda theme, done, _total: progress.update(
                    tasks[theme], completed=done
                ),
            )
    except SortPuzzleError as exc:
        _fail(exc)

    store = LevelStore(opts.store_path)
    for theme, levels in packs.items():
        store.put_pack(theme, levels)
        console.print(f"[green]{theme}:[/green] {len(levels)} levels")


@app.command()
def check(
    ctx: typer.Context,
    pack: Optional[str] = typer.Option(
        None, "--pack",
        help="Pack to check. All packs when omitted.",
    ),
) -> None:
    """Re-validate stored levels and report quality statistics."""
    opts: _Options = ctx.obj
    store = LevelStore(opts.store_path)
    levels = store.get_pack(pack) if pack is not None else store.all_levels()
    if not levels:
        console.print("[yellow]No levels to check.[/yellow]")
        return

    with _progress() as progress:
        task = progress.add_task("Checking", total=len(levels))
        batch = LevelTester.test_levels(
            levels, policy=opts.policy,
            on_progress=lambda done, _total: progress.update(task, completed=done),
        )

    for result in batch.results:
        if not (result.solvable and result.passes_quality):
            console.print(f"[red]{result}[/red] {result.error or ''}")
        elif result.warnings:
            console.print(f"[yellow]{result}[/yellow] {'; '.join(result.warnings)}")

    stats = LevelTester.statistics(levels, batch)
    table = Table(title="Summary", show_header=False)
    table.add_row("Levels", str(stats.total_levels))
    table.add_row("Passed", f"{batch.passed} ({batch.pass_rate:.0%})")
    table.add_row("With warnings", str(batch.warnings))
    table.add_row(
        "Optimal moves",
        f"{stats.min_optimal_moves}-{stats.max_optimal_moves} "
        f"(avg {stats.average_optimal_moves:.1f})",
    )
    table.add_row("Avg states explored", f"{stats.average_states_explored:.0f}")
    for tier, n in sorted(stats.tier_distribution.items(), key=lambda kv: kv[0].rank):
        table.add_row(f"  {tier.display_name}", str(n))
    console.print(table)

    for group in LevelTester.find_duplicates(levels):
        console.print(
            "[yellow]Duplicate layouts:[/yellow] " + ", ".join(level.id for level in group)
        )
    progression = LevelTester.verify_difficulty_progression(levels)
    if not progression.monotonic:
        console.print("[yellow]Average optimal moves drop between tiers.[/yellow]")

    if batch.failed:
        raise typer.Exit(code=1)


@app.command()
def solve(
    ctx: typer.Context,
    level_id: str = typer.Argument(..., help="Id of a stored level."),
    max_states: Optional[int] = typer.Option(
        None, "--max-states",
        min=1,
        help="Override the tier's state cap.",
    ),
) -> None:
    """Print an optimal solution for a stored level."""
    opts: _Options = ctx.obj
    level = _find_level(LevelStore(opts.store_path), level_id)
    bounds = opts.policy.tier(level.tier).bounds
    console.print(_render_level(level))

    result = Solver.solve(
        PuzzleState.from_level(level),
        max_depth=bounds.max_depth,
        max_states=max_states or bounds.max_states,
    )
    if not result.found:
        console.print(f"[red]{result}[/red]")
        raise typer.Exit(code=1)
    for i, move in enumerate(result.path, 1):
        console.print(f"  {i:>3}. {move}")
    console.print(f"[bold green]{result}[/bold green]")


@app.command()
def hint(
    ctx: typer.Context,
    level_id: str = typer.Argument(..., help="Id of a stored level."),
) -> None:
    """Print the first move of an optimal solution for a stored level."""
    opts: _Options = ctx.obj
    level = _find_level(LevelStore(opts.store_path), level_id)
    bounds = opts.policy.tier(level.tier).bounds
    result = Solver.hint(
        PuzzleState.from_level(level),
        max_depth=bounds.max_depth,
        max_states=bounds.max_states,
    )
    if result.found:
        console.print(f"[cyan]{result}[/cyan]")
    elif result.moves_to_solution == 0:
        console.print("[green]Already solved![/green]")
    else:
        console.print(f"[yellow]{result}[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
