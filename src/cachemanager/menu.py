"""Interactive delete menu for cachemanager."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from cachemanager.analyzer import summarize
from cachemanager.catalog import category_for_key, get_category_info
from cachemanager.cleaner import entries_for_action, execute_action
from cachemanager.display import (
    confirm_action,
    show_batch_report,
    show_deleting,
    show_deletion_result,
    show_entries,
    show_menu,
    menu_prompt,
)
from cachemanager.models import (
    Action,
    CacheCategory,
    DeleteAll,
    DeleteCategory,
    DeleteIndex,
    InvalidSelection,
    Quit,
    Selection,
    WorkingSet,
)
from cachemanager.settings import Settings


class MenuState(Enum):
    """States for the menu state machine."""

    MENU = auto()
    CONFIRM = auto()
    EXIT = auto()


def parse_selection(
    text: str,
    working_set: WorkingSet,
    exclusions: frozenset[CacheCategory] = frozenset(),
) -> Selection:
    """
    Turn one line of operator input into a menu selection.

    Letters are case-insensitive; a blank line quits. Numbers select a slot
    of the working set; slots whose entry was already deleted are invalid.
    """
    choice = text.strip()

    if not choice or choice.lower() == "q":
        return Quit()
    if choice.lower() == "a":
        return DeleteAll()

    if choice.isdecimal():
        try:
            index = int(choice)
        except ValueError:
            # e.g. more digits than int() accepts
            return InvalidSelection(reason="Invalid option.")
        entry = working_set.get(index)
        if entry is None:
            return InvalidSelection(
                reason=f"Invalid folder number. Please choose between 1 and {len(working_set)}."
            )
        if entry.deleted:
            return InvalidSelection(reason=f"Folder {index} was already deleted.")
        return DeleteIndex(index=index)

    if len(choice) == 1:
        category = category_for_key(choice)
        if category is not None and category not in exclusions:
            return DeleteCategory(category=category)

    return InvalidSelection(reason="Invalid option.")


@dataclass
class MenuSession:
    """Menu -> confirm -> delete loop over one working set.

    Input comes from *read_line* so tests can script a whole session.
    """

    console: Console
    working_set: WorkingSet
    settings: Settings
    read_line: Optional[Callable[[str], str]] = None
    state: MenuState = MenuState.MENU
    pending: Optional[Action] = None
    deleted_anything: bool = False

    def __post_init__(self):
        """Default to reading from the console."""
        if self.read_line is None:
            self.read_line = self.console.input

    def run(self) -> None:
        """Main menu loop, until the operator quits or nothing is left."""
        while self.state != MenuState.EXIT:
            try:
                self._handle_state()
            except (KeyboardInterrupt, EOFError):
                self.console.print()
                self._exit()

    def _handle_state(self) -> None:
        """Handle the current state."""
        if self.state == MenuState.MENU:
            self._menu()
        elif self.state == MenuState.CONFIRM:
            self._confirm()

    def _exit(self) -> None:
        if self.deleted_anything:
            self.console.print("[dim]Done.[/dim]")
        else:
            self.console.print("Exiting without deleting anything.")
        self.state = MenuState.EXIT

    # ─────────────────────────────────────────────────────────────────────────
    # Menu
    # ─────────────────────────────────────────────────────────────────────────

    def _menu(self) -> None:
        """Display the menu and dispatch one selection."""
        if not self.working_set.active:
            self.console.print("[green]No cache folders left to delete.[/green]")
            self.state = MenuState.EXIT
            return

        totals = summarize(self.working_set.entries)
        show_menu(self.working_set, totals, self.settings.exclusions, out=self.console)

        text = self.read_line(menu_prompt(self.working_set, self.settings.exclusions))
        selection = parse_selection(text, self.working_set, self.settings.exclusions)

        if isinstance(selection, Quit):
            self._exit()
        elif isinstance(selection, InvalidSelection):
            self.console.print(f"[red]{selection.reason}[/red]\n")
        elif not entries_for_action(selection, self.working_set):
            self.console.print(f"[yellow]No {selection.category.value} caches to delete.[/yellow]\n")
        else:
            self.pending = selection
            self.state = MenuState.CONFIRM

    # ─────────────────────────────────────────────────────────────────────────
    # Confirm
    # ─────────────────────────────────────────────────────────────────────────

    def _confirm_message(self, action: Action) -> str:
        if isinstance(action, DeleteAll):
            return "Delete ALL listed cache folders?"
        if isinstance(action, DeleteCategory):
            return f"Delete all {action.category.value} caches?"
        entry = self.working_set.get(action.index)
        color = get_category_info(entry.category).color
        return f"Delete [{color}]{escape(entry.path)}[/{color}]?"

    def _confirm(self) -> None:
        """Ask for confirmation, then delete or cancel."""
        action = self.pending
        self.pending = None
        self.state = MenuState.MENU

        if not confirm_action(self._confirm_message(action), self.read_line):
            self.console.print("[yellow]Cancelled.[/yellow]\n")
            return

        report = execute_action(
            action,
            self.working_set,
            self.settings,
            progress_callback=lambda entry: show_deleting(entry, out=self.console),
        )
        for result in report.results:
            show_deletion_result(result, out=self.console)
        show_batch_report(report, out=self.console)

        if report.success_count:
            self.deleted_anything = True

        if self.working_set.active:
            show_entries(
                self.working_set,
                show_sizes=not self.settings.skip_sizes,
                out=self.console,
            )
