"""
Ascent Quiz Visual Components.

Rich panels for the diagnostic questionnaire, level header, question,
answer feedback, mastery screen and mistake book review.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from rich import box
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.style import Style
from rich.table import Table
from rich.text import Text

from src.core.levels import DifficultyLevel
from src.core.models import DiagnosticItem, MasterySummary, MistakeRecord, Question

# =============================================================================
# COLOR THEME
# =============================================================================

ASCENT_THEME = {
    "primary": "#F5B700",  # Amber - main accent
    "secondary": "#3B82F6",  # Blue - competency tags
    "success": "#22C55E",  # Green - correct answers
    "warning": "#F97316",  # Orange - retry mode, misconceptions
    "error": "#EF4444",  # Red - incorrect
    "dim": "#64748B",  # Slate - secondary text
    "white": "#F8FAFC",
}

STYLES = {
    "primary": Style(color=ASCENT_THEME["primary"], bold=True),
    "secondary": Style(color=ASCENT_THEME["secondary"], bold=True),
    "success": Style(color=ASCENT_THEME["success"], bold=True),
    "warning": Style(color=ASCENT_THEME["warning"], bold=True),
    "error": Style(color=ASCENT_THEME["error"], bold=True),
    "dim": Style(color=ASCENT_THEME["dim"]),
}


def option_letter(index: int) -> str:
    """0 -> 'A', 1 -> 'B', ..."""
    return chr(65 + index)


# =============================================================================
# DIAGNOSTIC
# =============================================================================


def render_diagnostic_panel(item: DiagnosticItem, index: int, total: int) -> Panel:
    """
    Render one self-assessment statement with questionnaire progress.

    Args:
        item: Statement being asked
        index: Zero-based position in the questionnaire
        total: Number of statements
    """
    content = Text()
    content.append(f"{item.level.label}\n\n", style=STYLES["dim"])
    content.append(item.text, style=Style(color=ASCENT_THEME["white"]))

    progress = ProgressBar(
        total=max(1, total),
        completed=index,
        complete_style=Style(color=ASCENT_THEME["primary"]),
    )

    return Panel(
        Group(progress, Text(), content),
        title="[bold]Self-Assessment[/bold]",
        subtitle=f"[dim]Statement {index + 1} / {total}[/dim]",
        border_style=Style(color=ASCENT_THEME["primary"]),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_placement_panel(level: DifficultyLevel) -> Panel:
    text = Text()
    text.append("Recommended starting point\n\n", style=STYLES["dim"])
    text.append(f"{level.title}\n", style=Style(color=level.color, bold=True))
    text.append(level.subtitle, style=Style(color=ASCENT_THEME["white"]))
    return Panel(
        Align.center(text),
        title="[bold]Placement[/bold]",
        border_style=Style(color=level.color),
        box=box.HEAVY,
        padding=(1, 2),
    )


# =============================================================================
# QUIZ
# =============================================================================


def render_level_header(
    level: DifficultyLevel,
    remaining: int,
    score: int,
    retry_mode: bool = False,
) -> Panel:
    """Level title with remaining-count and score pills."""
    text = Text()
    text.append(f" {int(level)} ", style=Style(color="black", bgcolor=ASCENT_THEME["primary"], bold=True))
    text.append(f"  {level.title}", style=Style(color=level.color, bold=True))
    text.append(f"  {level.subtitle}\n", style=STYLES["dim"])
    if retry_mode:
        text.append("↻ RETRY MODE  ", style=STYLES["warning"])
    text.append(f"Remaining: {remaining}  ", style=STYLES["dim"])
    text.append(f"Score: {score}", style=STYLES["primary"])

    return Panel(
        text,
        border_style=Style(color=ASCENT_THEME["dim"]),
        box=box.ROUNDED,
        padding=(0, 1),
    )


def render_question_panel(question: Question, retry_mode: bool = False) -> Panel:
    """Question text with topic and competency tags, followed by lettered options."""
    header = Text()
    header.append(f"[{question.topic_tag}]", style=STYLES["primary"])
    header.append(f" [{question.competency}]", style=STYLES["secondary"])
    if retry_mode:
        header.append(" [RETRY]", style=STYLES["warning"])

    body = Text()
    body.append(question.text + "\n", style=Style(color=ASCENT_THEME["white"], bold=True))
    if question.image_url:
        body.append(f"\n(Figure: {question.image_url})\n", style=STYLES["dim"])
    body.append("\n")
    for i, option in enumerate(question.options):
        body.append(f"  {option_letter(i)}) ", style=Style(bold=True))
        body.append(option + "\n")

    return Panel(
        body,
        title=header,
        title_align="left",
        border_style=Style(color=ASCENT_THEME["primary"]),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_feedback_panel(question: Question, selected_index: int) -> Panel:
    """
    Post-submit feedback.

    Shows the explanation always; the misconception and learning tip are
    only shown for a wrong answer.
    """
    correct = question.is_correct(selected_index)
    color = ASCENT_THEME["success"] if correct else ASCENT_THEME["error"]

    content = Text()
    content.append("✓ CORRECT\n\n" if correct else "✗ INCORRECT\n\n", style=Style(color=color, bold=True))
    if not correct:
        content.append("Your answer: ", style=STYLES["dim"])
        content.append(
            f"{option_letter(selected_index)}) {question.options[selected_index]}\n",
            style=STYLES["error"],
        )
    content.append("Answer: ", style=STYLES["dim"])
    content.append(
        f"{option_letter(question.correct_option_index)}) {question.correct_option}\n\n",
        style=STYLES["success"],
    )
    content.append("Explanation: ", style=STYLES["primary"])
    content.append(question.explanation)

    if not correct:
        if question.misconception:
            content.append("\n\nDiagnosis: ", style=STYLES["warning"])
            content.append(question.misconception)
        if question.learning_tip:
            content.append("\n\nLearning tip: ", style=STYLES["secondary"])
            content.append(question.learning_tip)

    return Panel(
        content,
        border_style=Style(color=color),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_level_complete_panel(level: DifficultyLevel, next_level: DifficultyLevel) -> Panel:
    return Panel(
        f"[bold green]{level.title} cleared![/bold green]  "
        f"[dim]Moving on to {next_level.title}: {next_level.subtitle}[/dim]",
        border_style=Style(color=ASCENT_THEME["success"]),
        box=box.ROUNDED,
        padding=(0, 1),
    )


def render_mastery_panel(summary: MasterySummary) -> Panel:
    text = Text()
    text.append("🏆 MASTERY REACHED\n\n", style=STYLES["primary"])
    text.append(f"Cleared {summary.current_level.title}\n", style=Style(color=summary.current_level.color, bold=True))
    text.append(f"Score: {summary.score}\n", style=STYLES["success"])
    text.append(f"Questions answered: {summary.questions_answered}", style=STYLES["dim"])
    return Panel(
        Align.center(text),
        title="[bold]Session Summary[/bold]",
        border_style=Style(color=ASCENT_THEME["primary"]),
        box=box.HEAVY,
        padding=(1, 2),
    )


# =============================================================================
# MISTAKE BOOK
# =============================================================================


def render_mistake_table(
    records: list[MistakeRecord],
    miss_counts: Mapping[str, int] | None = None,
) -> Table:
    """
    One row per record, newest last.

    Args:
        records: Records to list
        miss_counts: Total misses per question id, shown in a "Misses" column
    """
    table = Table(title=f"Mistake Book ({len(records)})", box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Level", justify="center")
    table.add_column("Time", style="dim")
    table.add_column("Question")
    table.add_column("Your answer", style="red")
    if miss_counts is not None:
        table.add_column("Misses", justify="right", style="yellow")

    for i, record in enumerate(records, 1):
        q = record.question
        row = [
            str(i),
            Text(str(int(q.difficulty_level)), style=q.difficulty_level.color),
            datetime.fromtimestamp(record.timestamp / 1000).strftime("%H:%M:%S"),
            q.text,
            f"{option_letter(record.user_wrong_answer_index)}) {record.wrong_option}",
        ]
        if miss_counts is not None:
            row.append(str(miss_counts.get(q.id, 0)))
        table.add_row(*row)
    return table


def render_mistake_detail(record: MistakeRecord) -> Panel:
    """Expanded review of one record: options marked, then analysis."""
    q = record.question
    body = Text()
    body.append(q.text + "\n\n", style=Style(bold=True))
    for i, option in enumerate(q.options):
        if i == q.correct_option_index:
            body.append(f"  ✓ {option_letter(i)}) {option}\n", style=STYLES["success"])
        elif i == record.user_wrong_answer_index:
            body.append(f"  ✗ {option_letter(i)}) {option}\n", style=Style(color=ASCENT_THEME["error"], strike=True))
        else:
            body.append(f"    {option_letter(i)}) {option}\n", style=STYLES["dim"])

    body.append("\nExplanation: ", style=STYLES["primary"])
    body.append(q.explanation)
    if q.misconception:
        body.append("\nDiagnosis: ", style=STYLES["warning"])
        body.append(q.misconception)
    if q.learning_tip:
        body.append("\nLearning tip: ", style=STYLES["secondary"])
        body.append(q.learning_tip)

    return Panel(
        body,
        title=f"[bold]Level {int(q.difficulty_level)} · {q.topic_tag}[/bold]",
        title_align="left",
        border_style=Style(color=ASCENT_THEME["error"]),
        box=box.ROUNDED,
        padding=(1, 2),
    )


def render_empty_mistake_book() -> Panel:
    return Panel(
        "[green]No mistakes recorded yet. Keep it up![/green]",
        border_style=Style(color=ASCENT_THEME["success"]),
        box=box.ROUNDED,
        padding=(0, 1),
    )
