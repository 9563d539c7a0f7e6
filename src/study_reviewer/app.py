"""Interactive CLI application."""
import argparse
import logging
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_reviewer.dashboard import get_dashboard, get_retention_color
from study_reviewer.db import init_db, resolve_db_path
from study_reviewer.flashcards import (
    CardNotFound, add_card, delete_card, get_categories, get_review_queue, load_cards,
    record_review,
)
from study_reviewer.scheduler import is_due
from study_reviewer.settings import get_queue_limit, get_setting, set_setting
from study_reviewer.stats import difficulty_color, difficulty_label

console = Console()
logger = logging.getLogger(__name__)

GRADE_CHOICES = ["0", "1", "2", "3", "4", "5"]
EXIT_WORDS = ("q", "menu")
SETTING_KEYS = ("queue_limit", "seconds_per_card", "retention_window")


class SessionExitRequested(Exception):
    """Raised when the learner leaves a review session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    while True:
        answer = session_prompt(f"{prompt} [{'/'.join(choices)}]")
        if answer.strip() in choices:
            return int(answer)
        console.print(f"[red]Please enter one of {', '.join(choices)} (or q to stop).[/red]")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Study Reviewer[/bold]\n[dim]Spaced repetition flashcards[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("review", "Review due flashcards"),
        ("add", "Add a flashcard"),
        ("list", "List all flashcards"),
        ("delete", "Delete a flashcard"),
        ("dashboard", "Retention + progress"),
        ("settings", "View or change settings"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_review_session(db_path: str, cards: list) -> int:
    """Walk the learner through ``cards``; returns how many were graded."""
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Review Session[/bold] - {len(cards)} cards [dim](q to stop)[/dim]\n")
    graded = 0
    for i, card in enumerate(cards, 1):
        color = difficulty_color(card.state.difficulty)
        console.print(Panel(
            card.front,
            title=f"Card {i}/{len(cards)}",
            subtitle=f"[{color}]{difficulty_label(card.state.difficulty)}[/{color}]",
            border_style="cyan",
        ))
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
        console.print(Panel(card.back, border_style="green"))
        grade = session_int_prompt("Rate yourself (0=forgot, 3=hard, 4=good, 5=easy)", GRADE_CHOICES)
        updated = record_review(db_path, card.id, grade)
        graded += 1
        console.print(f"[dim]Next review in {updated.state.interval} day(s)[/dim]\n")
    return graded


def cmd_review(db_path: str):
    categories = get_categories(db_path)
    category = None
    if len(categories) > 1:
        category = Prompt.ask("Category", choices=["all"] + categories, default="all")
        if category == "all":
            category = None
    cards = get_review_queue(db_path, limit=get_queue_limit(db_path), category=category)
    try:
        graded = run_review_session(db_path, cards)
    except SessionExitRequested:
        console.print("[dim]Session stopped. Progress so far is saved.[/dim]")
        return
    if graded:
        console.print(f"[green]Reviewed {graded} card(s).[/green]")


def cmd_add(db_path: str):
    front = Prompt.ask("Front")
    back = Prompt.ask("Back")
    category = Prompt.ask("Category", default="General")
    card = add_card(db_path, front, back, category)
    console.print(f"[green]Added card {card.id}. First review: {card.state.next_review_date:%Y-%m-%d %H:%M}[/green]")


def cmd_list(db_path: str):
    cards = load_cards(db_path)
    if not cards:
        console.print("[yellow]No flashcards yet. Use 'add' to create one.[/yellow]")
        return
    now = datetime.now()
    table = Table(title="Flashcards")
    table.add_column("ID", justify="right")
    table.add_column("Front", style="cyan")
    table.add_column("Category")
    table.add_column("Difficulty")
    table.add_column("Ease", justify="right")
    table.add_column("Next Review")
    for card in cards:
        state = card.state
        color = difficulty_color(state.difficulty)
        table.add_row(
            str(card.id),
            card.front,
            card.category,
            f"[{color}]{difficulty_label(state.difficulty)}[/{color}]",
            f"{state.ease_factor:.2f}",
            "[bold red]due[/bold red]" if is_due(state, now) else f"{state.next_review_date:%Y-%m-%d}",
        )
    console.print(table)


def cmd_delete(db_path: str):
    card_id = Prompt.ask("Card ID")
    try:
        delete_card(db_path, int(card_id))
    except ValueError:
        console.print(f"[red]Not a card ID: {card_id}[/red]")
        return
    console.print(f"[green]Deleted card {card_id}.[/green]")


def cmd_dashboard(db_path: str):
    data = get_dashboard(db_path)
    stats = data["stats"]
    rate = data["retention_rate"]
    color = get_retention_color(rate)

    console.print(Panel(
        f"[bold]{stats.total_cards}[/bold] cards  |  [bold]{stats.due_for_review}[/bold] due  |  "
        f"~{data['estimated_minutes']} min to clear",
        title="Review Dashboard", border_style="blue",
    ))

    bar_filled = int(rate / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Retention: [bold]{rate}%[/bold] {bar} [{color}]{data['retention_label']}[/{color}]"
                  f" [dim](last {data['grades_counted']} grades)[/dim]\n")

    table = Table(title="Difficulty Breakdown")
    table.add_column("Easy", justify="right", style="green")
    table.add_column("Medium", justify="right", style="yellow")
    table.add_column("Hard", justify="right", style="red")
    d = stats.difficulties
    table.add_row(str(d.easy), str(d.medium), str(d.hard))
    console.print(table)

    console.print(f"\n  Reviewed today: [bold]{stats.reviewed_today}[/bold]  |  "
                  f"Avg ease: [bold]{stats.average_ease_factor:.2f}[/bold]  |  "
                  f"Best card run: [bold]{stats.longest_streak}[/bold]  |  "
                  f"Day streak: [bold]{data['current_streak']}[/bold] "
                  f"(best {data['longest_daily_streak']})")


def cmd_settings(db_path: str):
    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in SETTING_KEYS:
        table.add_row(key, get_setting(db_path, key, "[dim]default[/dim]"))
    console.print(table)
    key = Prompt.ask("Change which setting?", choices=list(SETTING_KEYS) + ["none"], default="none")
    if key == "none":
        return
    value = Prompt.ask("New value")
    if not value.isdigit() or int(value) <= 0:
        console.print("[red]Settings must be positive whole numbers.[/red]")
        return
    set_setting(db_path, key, value)
    console.print(f"[green]{key} = {value}[/green]")


COMMANDS = {
    "review": cmd_review,
    "add": cmd_add,
    "list": cmd_list,
    "delete": cmd_delete,
    "dashboard": cmd_dashboard,
    "settings": cmd_settings,
}


def main(argv=None):
    parser = argparse.ArgumentParser(prog="study-reviewer", description="Spaced repetition flashcards")
    parser.add_argument("--db", help="Path to the SQLite database")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    db_path = resolve_db_path(args.db)
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="review").strip().lower()
        try:
            if choice in COMMANDS:
                COMMANDS[choice](db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you next review![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except CardNotFound as e:
            console.print(f"[red]{e}[/red]")
        except Exception as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
