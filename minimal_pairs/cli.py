"""
Minimal Pairs: Terminal front end.

A Rich terminal interface for the Leitner-scheduled grammar quiz.

Commands:
- minimal-pairs study       - Answer the items due this session
- minimal-pairs stats       - Show accuracy, streaks and Leitner boxes
- minimal-pairs categories  - List, enable or disable grammar categories
- minimal-pairs preview     - Show the upcoming queue
- minimal-pairs reset       - Clear all progress
"""
from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from .config import get_settings
from .engine import ExhaustionReason, QuizEngine
from .item_store import Category, Item, ItemStore
from .ledger import LEITNER_BOXES, review_interval
from .persistence import JsonFileGateway, MemoryGateway, PersistenceGateway
from .presentation import Presentation, Slot
from .session import Stats

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="minimal-pairs",
    help="Minimal Pairs: Leitner-scheduled German grammar quiz",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "highlight": "bold yellow",
    "info": "bold cyan",
    "dim": "dim",
}


def highlighted(text: str, highlights: tuple[str, ...]) -> Text:
    """Mark the differing substrings of a sentence."""
    rich_text = Text(text)
    if highlights:
        rich_text.highlight_words(highlights, style=STYLES["highlight"])
    return rich_text


# =============================================================================
# Presenter
# =============================================================================


class RichPresenter:
    """QuizListener that renders notifications to the terminal."""

    def __init__(self, console: Console):
        self.console = console
        self.exhausted: Optional[ExhaustionReason] = None
        self.stats = Stats()

    def on_item_presented(self, item: Item, correct_slot: Slot) -> None:
        self.exhausted = None
        presentation = Presentation(item=item, correct_slot=correct_slot)
        first, second = presentation.text(Slot.A), presentation.text(Slot.B)

        body = Text()
        body.append("1. ", style=STYLES["dim"])
        body.append_text(highlighted(first, item.highlight))
        body.append("\n\n")
        body.append("2. ", style=STYLES["dim"])
        body.append_text(highlighted(second, item.highlight))

        self.console.print()
        self.console.print(
            Panel(
                body,
                title=item.category.display_name,
                title_align="left",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def on_answer_result(self, is_correct: bool, explanation: str) -> None:
        if is_correct:
            self.console.print("[green]✓ Correct![/green]")
        else:
            self.console.print("[red]✗ Wrong[/red]")
        if explanation:
            self.console.print(Text(explanation, style=STYLES["dim"]))

    def on_queue_exhausted(self, reason: ExhaustionReason) -> None:
        self.exhausted = reason

    def on_stats_changed(self, stats: Stats) -> None:
        self.stats = stats


# =============================================================================
# Wiring
# =============================================================================


def _gateway() -> PersistenceGateway:
    settings = get_settings()
    if not settings.persist:
        return MemoryGateway()
    return JsonFileGateway(settings.state_path)


def _build_engine(
    data_dir: Optional[Path] = None,
    presenter: Optional[RichPresenter] = None,
) -> QuizEngine:
    settings = get_settings()
    store = ItemStore(data_dir=data_dir or settings.data_dir)
    store.load()
    return QuizEngine(
        store,
        _gateway(),
        rng=random.Random(settings.random_seed),
        listener=presenter,
    )


def _summary_line(stats: Stats) -> str:
    return f"{stats.total_correct}/{stats.total_answered} correct ({stats.accuracy}%)"


def _parse_category(value: str) -> Category:
    category = Category.parse(value.strip().lower())
    if category is None:
        valid = ", ".join(c.value for c in Category)
        raise typer.BadParameter(f"Unknown category '{value}'. Choose from: {valid}")
    return category


# =============================================================================
# Commands
# =============================================================================

DATA_DIR_OPTION = typer.Option(
    None,
    "--dir", "-d",
    help="Directory with <category>.json item files",
)


@app.command()
def study(data_dir: Optional[Path] = DATA_DIR_OPTION) -> None:
    """
    Start an interactive review session.

    Pick the correct sentence with 1 or 2, q to quit. When the session's
    queue is empty you can continue with the next session.
    """
    presenter = RichPresenter(console)
    engine = _build_engine(data_dir, presenter)

    engine.start(present_first=False)
    console.print("\n[bold cyan]Minimal Pairs[/bold cyan] - German grammar")
    console.print(f"[dim]Session {engine.session_number}[/dim]")
    engine.request_next()

    try:
        while True:
            if engine.current is None:
                if presenter.exhausted is ExhaustionReason.ALL_DONE:
                    console.print(Panel(
                        f"[bold]Session {engine.session_number} complete![/bold]\n\n"
                        f"{_summary_line(presenter.stats)}",
                        border_style="green",
                    ))
                    if Confirm.ask("Continue reviewing?", default=False):
                        engine.continue_reviewing()
                        continue
                else:
                    console.print("\n[yellow]No items available.[/yellow]")
                    console.print("Enable a category with: minimal-pairs categories --enable <name>")
                break

            choice = Prompt.ask(
                "Which sentence is correct?", choices=["1", "2", "q"], show_choices=True
            )
            if choice == "q":
                break

            outcome = engine.answer(Slot.from_index(int(choice) - 1))
            if outcome is not None and not outcome.is_correct:
                number = 1 if outcome.correct_slot is Slot.A else 2
                console.print(f"[dim]Correct was {number}: {outcome.item.correct}[/dim]")

            Prompt.ask("[dim]Press Enter for next[/dim]", default="", show_default=False)
            engine.request_next()

    except KeyboardInterrupt:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")

    stats_ = presenter.stats
    console.print(
        f"\n[bold]{_summary_line(stats_)}[/bold]  "
        f"[dim]streak {stats_.streak}, best {stats_.max_streak}[/dim]"
    )


@app.command()
def stats(data_dir: Optional[Path] = DATA_DIR_OPTION) -> None:
    """Show accuracy, streaks, per-category results and Leitner boxes."""
    engine = _build_engine(data_dir)
    engine.start(present_first=False)
    stats_ = engine.state.stats

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Correct", str(stats_.total_correct))
    table.add_row("Answered", str(stats_.total_answered))
    table.add_row("Accuracy", f"{stats_.accuracy}%")
    table.add_row("Streak", str(stats_.streak))
    table.add_row("Best streak", str(stats_.max_streak))
    table.add_row("Session", str(engine.session_number))
    console.print(table)

    counts = engine.box_counts()
    box_table = Table(title="Leitner Boxes (active categories)")
    for box in range(1, LEITNER_BOXES + 1):
        box_table.add_column(f"Box {box}\n[dim]every {review_interval(box)}[/dim]", justify="right")
    box_table.add_row(*(str(counts[box]) for box in range(1, LEITNER_BOXES + 1)))
    console.print(box_table)

    _print_categories(engine)


def _print_categories(engine: QuizEngine) -> None:
    counts = engine.store.counts_by_category()
    table = Table(title="Categories")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Active")
    table.add_column("Items", justify="right")
    table.add_column("Accuracy", justify="right")

    for category in Category:
        category_stats = engine.state.stats.categories.get(category)
        accuracy = (
            f"{category_stats.accuracy}%"
            if category_stats and category_stats.total > 0
            else ""
        )
        active = category in engine.state.active_categories
        table.add_row(
            category.value,
            category.display_name,
            "[green]yes[/green]" if active else "[dim]no[/dim]",
            str(counts[category]),
            accuracy,
        )
    console.print(table)


@app.command()
def categories(
    enable: Optional[List[str]] = typer.Option(
        None, "--enable", "-e", help="Category to enable (repeatable)"
    ),
    disable: Optional[List[str]] = typer.Option(
        None, "--disable", "-x", help="Category to disable (repeatable)"
    ),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
) -> None:
    """List grammar categories, optionally enabling or disabling some."""
    to_enable = [_parse_category(value) for value in enable or []]
    to_disable = [_parse_category(value) for value in disable or []]

    engine = _build_engine(data_dir)
    engine.start(present_first=False)

    for category in to_enable:
        engine.toggle_category(category, True)
    for category in to_disable:
        engine.toggle_category(category, False)

    _print_categories(engine)


@app.command()
def preview(
    limit: int = typer.Option(10, "--limit", "-l", help="Number of items to preview"),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
) -> None:
    """Preview the items queued for this session."""
    engine = _build_engine(data_dir)
    engine.start(present_first=False)
    upcoming = engine.preview(limit=limit)

    if not upcoming:
        console.print("\n[green]Nothing due this session.[/green]")
        return

    console.print(f"\n[bold]Upcoming Items[/bold] (session {engine.session_number})\n")

    table = Table()
    table.add_column("ID")
    table.add_column("Category")
    table.add_column("Box", justify="right")
    table.add_column("Status")

    for item, status in upcoming:
        box = engine.state.ledger.lookup(item.id).box
        status_styled = "[yellow]due[/yellow]" if status == "due" else "[green]new[/green]"
        table.add_row(item.id, item.category.display_name, str(box), status_styled)

    console.print(table)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
    data_dir: Optional[Path] = DATA_DIR_OPTION,
) -> None:
    """Clear all progress: boxes, stats and session number."""
    if not confirm and not Confirm.ask(
        "Reset ALL progress? This cannot be undone!", default=False
    ):
        raise typer.Exit(0)

    engine = _build_engine(data_dir)
    engine.start(present_first=False)
    engine.reset_all_progress()

    console.print("[green]All progress has been reset.[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
