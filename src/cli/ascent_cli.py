"""
Ascent CLI - Adaptive leveled quiz in the terminal.

Places the learner with a short self-assessment, then runs leveled
question sets where every missed question is retried until answered
correctly before the next level unlocks.

Usage:
    ascent assess              # Self-assessment, then start the quiz
    ascent quiz --level 2      # Start directly at level 2
    ascent mistakes            # Review the mistake book
    ascent levels              # List levels and question counts
    ascent bank                # Validate the question bank
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import Settings, get_settings
from src.content.loader import JsonDiagnosticSource, JsonQuestionRepository, QuestionBankError
from src.core.levels import DifficultyLevel
from src.core.models import MasterySummary, Question
from src.delivery import quiz_visuals as ui
from src.study.mistake_book import MistakeBook, MistakeBookStore
from src.study.placement import DiagnosticSession, PlacementEvaluator
from src.study.progression_engine import LevelProgressionEngine

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="ascent",
    help="🧪 Ascent - Adaptive leveled quiz with retry-until-mastery",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()

FINISH_KEY = "f"
RESTART_KEY = "r"
QUIT_KEY = "q"


def _load_repository(settings: Settings) -> JsonQuestionRepository:
    try:
        return JsonQuestionRepository(settings.question_bank_path)
    except QuestionBankError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)


def _ask_option(question: Question) -> str:
    """Prompt until a valid option letter, finish, restart or quit key is entered."""
    letters = [ui.option_letter(i).lower() for i in range(len(question.options))]
    while True:
        raw = Prompt.ask(
            f"[bold]Your answer[/bold] [dim]({'/'.join(letters)}, "
            f"{FINISH_KEY}=finish level, {RESTART_KEY}=restart, {QUIT_KEY}=quit)[/dim]"
        )
        choice = raw.strip().lower()
        if choice in letters or choice in (FINISH_KEY, RESTART_KEY, QUIT_KEY):
            return choice
        console.print(f"[yellow]Please enter one of: {', '.join(letters)}[/]")


# =============================================================================
# Quiz Loop
# =============================================================================


def run_quiz(
    start_level: DifficultyLevel,
    settings: Settings,
    seed: int | None = None,
    save: bool = True,
) -> MasterySummary | None:
    """
    Drive a progression engine interactively until mastery or quit.

    Returns:
        The last mastery summary, or None if mastery was never reached
    """
    repository = _load_repository(settings)
    book = MistakeBook()

    engine = LevelProgressionEngine(
        repository,
        start_level,
        on_mistake=book.record,
        points_per_level=settings.points_per_level,
        seed=seed if seed is not None else settings.shuffle_seed,
    )

    # Mistakes already recorded are written even if the session is interrupted
    try:
        summary = _play(engine, start_level)
    finally:
        if save and len(book):
            store = MistakeBookStore(settings.mistake_book_path)
            store.append(book.records)
            console.print(f"[dim]{len(book)} mistake(s) saved to {store.path}[/]")

    if not engine.is_finished:
        console.print(
            f"[dim]Session ended at {engine.current_level.title} "
            f"with {engine.score} points ({engine.total_answered} answered).[/]"
        )
    return summary


def _play(engine: LevelProgressionEngine, start_level: DifficultyLevel) -> MasterySummary | None:
    """Run the prompt loop. Returns the last mastery summary, or None on quit."""
    summary: MasterySummary | None = None

    while True:
        if engine.is_finished:
            summary = engine.summary
            console.print(ui.render_mastery_panel(summary))
            if not Confirm.ask(
                f"[bold]Practise again from {start_level.title}?[/bold]", default=False
            ):
                return summary
            engine.restart(start_level)
            continue

        state = engine.state
        question = engine.current_question

        if question is None:
            console.print(
                f"[yellow]No questions available for {state.current_level.title}.[/]"
            )
            choice = Prompt.ask(
                "[bold]Skip this level or quit?[/bold]",
                choices=[FINISH_KEY, QUIT_KEY],
                default=QUIT_KEY,
            )
            if choice == QUIT_KEY:
                return summary
            engine.finish_level()
            continue

        console.print()
        console.print(ui.render_level_header(
            state.current_level, state.remaining, state.score, state.is_retry_mode,
        ))
        console.print(ui.render_question_panel(question, state.is_retry_mode))

        choice = _ask_option(question)
        if choice == QUIT_KEY:
            return summary
        if choice == RESTART_KEY:
            console.print(f"[yellow]↻ Restarting from {start_level.title}[/]")
            engine.restart(start_level)
            continue

        level_before = engine.current_level
        if choice == FINISH_KEY:
            engine.finish_level()
        else:
            engine.select_option(ord(choice) - ord("a"))
            outcome = engine.submit()
            if outcome is None:
                continue
            console.print(ui.render_feedback_panel(question, outcome.selected_index))
            Prompt.ask("[dim]Press Enter for the next question[/dim]", default="", show_default=False)
            engine.advance()

        if not engine.is_finished and engine.current_level != level_before:
            console.print(ui.render_level_complete_panel(level_before, engine.current_level))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def assess(
    start: Annotated[
        bool, typer.Option("--start/--no-start", help="Continue into the quiz after placement")
    ] = True,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Seed for question order")
    ] = None,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Save mistakes to the mistake book")
    ] = True,
) -> None:
    """
    Take the self-assessment to find your starting level.

    Answer each statement with y (I can do this) or n (no / not sure).
    """
    settings = get_settings()
    try:
        source = JsonDiagnosticSource(settings.diagnostic_path)
    except QuestionBankError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    session = DiagnosticSession(
        source.fetch_diagnostic_items(),
        evaluator=PlacementEvaluator(settings.gate_pass_ratio),
    )
    if session.total == 0:
        console.print("[yellow]The self-assessment has no statements; starting at Level 1.[/]")
        placement = DifficultyLevel.lowest()
    else:
        placement = None
        while placement is None:
            item = session.current_item
            console.print(ui.render_diagnostic_panel(item, session.index, session.total))
            placement = session.answer(Confirm.ask("[bold]Can you do this?[/bold]"))

    console.print(ui.render_placement_panel(placement))

    if start:
        run_quiz(placement, settings, seed=seed, save=save)


@app.command()
def quiz(
    level: Annotated[
        int, typer.Option("--level", "-l", min=1, max=4, help="Starting level (1-4)")
    ] = 1,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Seed for question order")
    ] = None,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Save mistakes to the mistake book")
    ] = True,
) -> None:
    """
    Start the leveled quiz.

    Examples:
        ascent quiz              # Start at level 1
        ascent quiz -l 3         # Start at level 3
        ascent quiz --seed 42    # Reproducible question order
    """
    run_quiz(DifficultyLevel(level), get_settings(), seed=seed, save=save)


@app.command()
def mistakes(
    clear: Annotated[
        bool, typer.Option("--clear", help="Delete the saved mistake book")
    ] = False,
    detail: Annotated[
        bool, typer.Option("--detail", "-d", help="Show full analysis for every mistake")
    ] = False,
    level: Annotated[
        int | None, typer.Option("--level", "-l", min=1, max=4, help="Only this level")
    ] = None,
) -> None:
    """Review the questions you got wrong."""
    store = MistakeBookStore(get_settings().mistake_book_path)

    if clear:
        if store.clear():
            console.print("[green]✓ Mistake book cleared[/]")
        else:
            console.print("[dim]Mistake book is already empty[/]")
        return

    book = store.load()
    records = book.for_level(level) if level else book.records
    if not records:
        console.print(ui.render_empty_mistake_book())
        return

    scoped = MistakeBook(records)
    console.print(ui.render_mistake_table(records, scoped.miss_counts()))
    console.print(
        f"[dim]{len(records)} miss(es) across "
        f"{len(scoped.distinct_questions())} question(s)[/]"
    )
    if detail:
        for record in records:
            console.print(ui.render_mistake_detail(record))


@app.command()
def levels() -> None:
    """List the levels and how many questions each has."""
    repository = _load_repository(get_settings())
    stats = repository.get_stats()

    table = Table(title="Levels")
    table.add_column("Level", style="cyan", justify="center")
    table.add_column("Title", style="bold")
    table.add_column("Competency")
    table.add_column("Questions", justify="right", style="green")
    for lvl in DifficultyLevel:
        table.add_row(str(int(lvl)), lvl.title, lvl.subtitle, str(stats[int(lvl)]))
    console.print(table)


@app.command()
def bank(
    path: Annotated[
        Path | None, typer.Argument(help="Question bank file (defaults to configured bank)")
    ] = None,
) -> None:
    """Validate a question bank file and summarize it."""
    settings = get_settings()
    target = path or settings.question_bank_path
    try:
        repository = JsonQuestionRepository(target)
    except QuestionBankError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    stats = repository.get_stats()
    empty = [lvl for lvl, count in stats.items() if count == 0]

    console.print(f"[green]✓ {len(repository)} questions in {target}[/]")
    for lvl, count in stats.items():
        console.print(f"  Level {lvl}: {count}")
    if empty:
        console.print(
            f"[yellow]⚠ No questions for level(s) {', '.join(map(str, empty))}; "
            f"those levels cannot be cleared normally[/]"
        )


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    🧪 Ascent - Adaptive leveled quiz

    \b
    Quick Start:
      ascent assess            # Find your level, then practise
      ascent quiz -l 2         # Practise from level 2
      ascent mistakes -d       # Review what you missed
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else get_settings().log_level,
        format="<level>{message}</level>",
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
