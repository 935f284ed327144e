"""Command-line interface for brickvault.

Built with Typer for commands and Rich for output.
"""

import random
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .config import configure_logging, get_config
from .db import get_db
from .db.models import LegoSet
from .db.schemas import SetCreate, SetStatus, SetUpdate
from .editor import EditorSaveError, EditorView, HomeSectionsEditor
from .preferences import PreferencesManager
from .sections import (
    HomeState,
    SmartSectionType,
    ThemeSectionConfig,
    available_themes,
    build_home,
    section_label,
    smart_section_description,
    smart_section_title,
)

# Create the main app
app = typer.Typer(
    name="brickvault",
    help="Track your LEGO collection and customize your home sections.",
    no_args_is_help=True,
)

set_app = typer.Typer(help="Manage sets in the collection.")
app.add_typer(set_app, name="set")

sections_app = typer.Typer(help="Customize which sections appear on your home screen.")
app.add_typer(sections_app, name="sections")

# Rich console for pretty output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging before any command runs."""
    config = get_config()
    errors = config.validate()
    for error in errors:
        print_warning(error)
    level = "DEBUG" if verbose else config.log_level
    configure_logging(level if not errors else "WARNING")


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def _find_set(ref: str) -> Optional[LegoSet]:
    """Look up a set by ID or catalog number."""
    db = get_db()
    return db.get_set(ref) or db.get_set_by_number(ref)


def _user(user: Optional[str]) -> str:
    return user or get_config().user_id


def format_set_table(sets: list, title: str = "Sets") -> Table:
    """Create a rich table for displaying sets."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Number", style="cyan")
    table.add_column("Name", max_width=40)
    table.add_column("Theme", style="green")
    table.add_column("Pieces", justify="right")
    table.add_column("Year", justify="center")
    table.add_column("Status", style="yellow")
    table.add_column("Received")

    for lego_set in sets:
        table.add_row(
            lego_set.set_number,
            lego_set.name,
            lego_set.theme or "-",
            f"{lego_set.piece_count:,}" if lego_set.piece_count else "-",
            str(lego_set.year) if lego_set.year else "-",
            lego_set.status,
            lego_set.date_received or "-",
        )

    return table


def format_draft_table(editor: HomeSectionsEditor) -> Table:
    """Create a rich table for an editor draft."""
    table = Table(title="Home Sections", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=3)
    table.add_column("Type")
    table.add_column("Section", style="cyan")

    for i, config in enumerate(editor.draft, 1):
        kind = "[blue]theme[/blue]" if isinstance(config, ThemeSectionConfig) else "[green]smart[/green]"
        table.add_row(str(i), kind, section_label(config))

    return table


def _open_editor(user_id: str) -> HomeSectionsEditor:
    manager = PreferencesManager(get_db())
    themes = available_themes(get_db().get_all_sets())
    return manager.open_home_sections_editor(user_id, themes)


def _save(editor: HomeSectionsEditor) -> None:
    try:
        editor.save()
    except EditorSaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


# ============================================================================
# Set Commands
# ============================================================================


@set_app.command("add")
def set_add(
    set_number: str = typer.Argument(..., help="Catalog number, e.g. 10497-1"),
    name: str = typer.Argument(..., help="Set name"),
    theme: Optional[str] = typer.Option(None, "--theme", "-t", help="Theme"),
    pieces: Optional[int] = typer.Option(None, "--pieces", "-p", help="Piece count"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Release year"),
    status: SetStatus = typer.Option(SetStatus.UNOPENED, "--status", "-s", help="Build status"),
    received: Optional[str] = typer.Option(None, "--received", "-r", help="Date received (YYYY-MM-DD)"),
) -> None:
    """Add a set to the collection."""
    db = get_db()
    try:
        data = SetCreate(
            set_number=set_number,
            name=name,
            theme=theme,
            piece_count=pieces,
            year=year,
            status=status,
            has_been_assembled=status == SetStatus.ASSEMBLED,
            date_received=_parse_date(received),
        )
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    lego_set = db.create_set(data)
    print_success(f"Added: {lego_set.set_number} {lego_set.name}")


@set_app.command("list")
def set_list(
    status: Optional[SetStatus] = typer.Option(None, "--status", "-s", help="Filter by status"),
) -> None:
    """List sets in the collection."""
    sets = get_db().get_all_sets()
    if status:
        sets = [s for s in sets if s.status == status.value]

    if not sets:
        print_info("No sets found. Add one with 'set add'")
        return

    console.print(format_set_table(sets))


@set_app.command("status")
def set_status(
    ref: str = typer.Argument(..., help="Set ID or catalog number"),
    status: SetStatus = typer.Argument(..., help="New status"),
) -> None:
    """Change the build status of a set."""
    lego_set = _find_set(ref)
    if not lego_set:
        print_error(f"Set not found: {ref}")
        raise typer.Exit(1)

    get_db().update_set(lego_set.id, SetUpdate(status=status))
    print_success(f"{lego_set.name} is now {status.value}")


@set_app.command("remove")
def set_remove(
    ref: str = typer.Argument(..., help="Set ID or catalog number"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Remove a set from the collection."""
    lego_set = _find_set(ref)
    if not lego_set:
        print_error(f"Set not found: {ref}")
        raise typer.Exit(1)

    if not force and not typer.confirm(f"Remove {lego_set.name}?", default=False):
        print_info("Cancelled.")
        return

    get_db().delete_set(lego_set.id)
    print_success(f"Removed: {lego_set.name}")


# ============================================================================
# Home
# ============================================================================


@app.command()
def home(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the Discover shuffle"),
) -> None:
    """Show your home sections."""
    user_id = _user(user)
    sets = get_db().get_all_sets()
    configs = PreferencesManager(get_db()).get_home_sections(user_id)
    rng = random.Random(seed) if seed is not None else None

    view = build_home(configs, sets, rng)

    if view.state == HomeState.EMPTY_COLLECTION:
        console.print(Panel("Your collection is empty.\nAdd some sets to get started!", style="cyan"))
        return
    if view.state == HomeState.NO_SECTIONS:
        console.print(Panel("No sections configured.\nRun 'sections add-smart' or 'sections add-theme'.", style="yellow"))
        return
    if view.state == HomeState.ALL_EMPTY:
        console.print(Panel("None of your sections have any sets yet.", style="yellow"))
        return

    for section in view.sections:
        table = Table(title=section.title, show_header=True, header_style="bold magenta")
        table.add_column("Number", style="cyan")
        table.add_column("Name", max_width=40)
        table.add_column("Detail", style="green")

        for lego_set in section.visible_sets:
            table.add_row(lego_set.set_number, lego_set.name, section.detail_for(lego_set) or "")

        console.print(table)
        if section.has_more:
            print_info(f"Showing {len(section.visible_sets)} of {len(section.sets)}")
        if section.view_all_filter:
            print_info(f"View all: ?{section.view_all_filter}")


# ============================================================================
# Home Section Commands
# ============================================================================


@sections_app.command("list")
def sections_list(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """List configured home sections in order."""
    editor = _open_editor(_user(user))
    if editor.is_empty:
        print_info("No sections configured. Add sections to customize your home view.")
        return

    console.print(format_draft_table(editor))
    if editor.is_default:
        print_info("Using the default sections")


@sections_app.command("available")
def sections_available(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Show sections that can still be added."""
    editor = _open_editor(_user(user))

    table = Table(title="Smart Sections", show_header=True, header_style="bold magenta")
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Description", style="dim")
    for section_type in editor.available_smart_types:
        table.add_row(
            section_type.value,
            smart_section_title(section_type),
            smart_section_description(section_type),
        )
    console.print(table)

    themes = editor.available_themes
    if themes:
        console.print("\n[bold]Themes:[/bold] " + ", ".join(themes))
    else:
        print_info("No more themes to add")


@sections_app.command("add-smart")
def sections_add_smart(
    section_type: SmartSectionType = typer.Argument(..., help="Smart section type"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Append a smart section."""
    editor = _open_editor(_user(user))
    if not editor.add_smart(section_type):
        print_warning(f"{smart_section_title(section_type)} is already on your home screen")
        return
    _save(editor)
    print_success(f"Added {smart_section_title(section_type)}")


@sections_app.command("add-theme")
def sections_add_theme(
    theme_name: str = typer.Argument(..., help="Theme name"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Append a theme section."""
    editor = _open_editor(_user(user))
    try:
        added = editor.add_theme(theme_name)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not added:
        print_warning(f"{theme_name} is already on your home screen")
        return
    _save(editor)
    print_success(f"Added {theme_name.strip()}")


@sections_app.command("remove")
def sections_remove(
    position: int = typer.Argument(..., help="Section position (from 'sections list')"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Remove a section."""
    editor = _open_editor(_user(user))
    try:
        removed = editor.remove(position - 1)
    except IndexError as e:
        print_error(str(e))
        raise typer.Exit(1)
    _save(editor)
    print_success(f"Removed {section_label(removed)}")


@sections_app.command("move")
def sections_move(
    from_position: int = typer.Argument(..., help="Current position"),
    to_position: int = typer.Argument(..., help="New position"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Move a section to a new position."""
    editor = _open_editor(_user(user))
    try:
        editor.move(from_position - 1, to_position - 1)
    except IndexError as e:
        print_error(str(e))
        raise typer.Exit(1)
    _save(editor)
    console.print(format_draft_table(editor))


@sections_app.command("reset")
def sections_reset(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Restore the default home sections."""
    editor = _open_editor(_user(user))
    if not editor.can_reset:
        print_info("Already using the default sections")
        return
    editor.reset()
    _save(editor)
    print_success("Restored default home sections")


@sections_app.command("edit")
def sections_edit(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User ID"),
) -> None:
    """Interactively edit home sections, then save or cancel."""
    editor = _open_editor(_user(user))

    while editor.is_open:
        if editor.view == EditorView.ADD_SMART:
            _pick_smart(editor)
            continue
        if editor.view == EditorView.ADD_THEME:
            _pick_theme(editor)
            continue

        if editor.is_empty:
            print_info("No sections configured. Add sections to customize your home view.")
        else:
            console.print(format_draft_table(editor))

        actions = ["a", "t", "s", "q"]
        menu = "[a]dd smart  [t]heme  [s]ave  [q]uit"
        if not editor.is_empty:
            actions[2:2] = ["r", "m"]
            menu = "[a]dd smart  [t]heme  [r]emove  [m]ove  [s]ave  [q]uit"
        if editor.can_reset:
            actions.insert(-2, "d")
            menu = menu.replace("[s]ave", "[d]efaults  [s]ave")

        choice = Prompt.ask(menu, choices=actions, default="s")
        if choice == "a":
            editor.begin_add_smart()
        elif choice == "t":
            editor.begin_add_theme()
        elif choice == "r":
            position = typer.prompt("Remove which section?", type=int)
            try:
                editor.remove(position - 1)
            except IndexError as e:
                print_error(str(e))
        elif choice == "m":
            from_position = typer.prompt("Move which section?", type=int)
            to_position = typer.prompt("To position", type=int)
            try:
                editor.move(from_position - 1, to_position - 1)
            except IndexError as e:
                print_error(str(e))
        elif choice == "d":
            editor.reset()
        elif choice == "s":
            try:
                editor.save()
            except EditorSaveError as e:
                print_error(f"{e}. Your changes are kept; try saving again.")
                continue
            print_success("Saved home sections")
        else:
            editor.cancel()
            print_info("Changes discarded.")


def _pick_smart(editor: HomeSectionsEditor) -> None:
    options = editor.available_smart_types
    if not options:
        print_info("All smart sections are already added")
        editor.back()
        return

    for i, section_type in enumerate(options, 1):
        console.print(
            f"  {i}. [cyan]{smart_section_title(section_type)}[/cyan] "
            f"[dim]{smart_section_description(section_type)}[/dim]"
        )
    choice = typer.prompt("Add which section? (0 to go back)", type=int, default=0)
    if 1 <= choice <= len(options):
        editor.add_smart(options[choice - 1])
    else:
        editor.back()


def _pick_theme(editor: HomeSectionsEditor) -> None:
    options = editor.available_themes
    if not options:
        print_info("No more themes to add")
        editor.back()
        return

    for i, theme in enumerate(options, 1):
        console.print(f"  {i}. [cyan]{theme}[/cyan]")
    choice = typer.prompt("Add which theme? (0 to go back)", type=int, default=0)
    if 1 <= choice <= len(options):
        editor.add_theme(options[choice - 1])
    else:
        editor.back()


# ============================================================================
# Utility Commands
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"brickvault version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    app()
