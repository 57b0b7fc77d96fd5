"""Interactive repository menu.

Key decoding, state transitions and rendering are plain Python so they can be
tested without a terminal. RepositorySelector wires them into a Textual app.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from repomux.errors import SelectorDriverError

HEADER = "Select a repository:"
FOOTER = "Press q to quit."


class Action(Enum):
    """What a key press asks the menu to do."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    NOOP = "noop"


KEY_ACTIONS = {
    "up": Action.MOVE_UP,
    "k": Action.MOVE_UP,
    "down": Action.MOVE_DOWN,
    "j": Action.MOVE_DOWN,
    "enter": Action.CONFIRM,
    "space": Action.CONFIRM,
    "q": Action.CANCEL,
    "ctrl+c": Action.CANCEL,
}


def decode_key(key: str) -> Action:
    """Translate a Textual key name into an Action."""
    return KEY_ACTIONS.get(key, Action.NOOP)


@dataclass
class SelectionState:
    """Menu state.

    Attributes:
        options: Names shown in the menu, in display order.
        cursor: Index of the highlighted row, always within ``options``.
        chosen: Index confirmed by the user, None until then.
        cancelled: True once the user quit without choosing.
    """

    options: list[str]
    cursor: int = 0
    chosen: int | None = None
    cancelled: bool = False

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError("SelectionState needs at least one option")
        if not 0 <= self.cursor < len(self.options):
            raise ValueError(f"cursor {self.cursor} out of range")

    @property
    def finished(self) -> bool:
        return self.cancelled or self.chosen is not None

    @property
    def selected(self) -> str | None:
        """The confirmed option, or None if nothing was confirmed."""
        if self.chosen is None:
            return None
        return self.options[self.chosen]

    def apply(self, action: Action) -> SelectionState:
        """Apply one action in place and return self.

        Actions arriving after confirm or cancel are ignored.
        """
        if self.finished:
            return self

        if action is Action.MOVE_UP:
            self.cursor = max(self.cursor - 1, 0)
        elif action is Action.MOVE_DOWN:
            self.cursor = min(self.cursor + 1, len(self.options) - 1)
        elif action is Action.CONFIRM:
            self.chosen = self.cursor
        elif action is Action.CANCEL:
            self.cancelled = True

        return self


def render_menu(state: SelectionState) -> str:
    """Render the whole menu from state alone."""
    lines = [HEADER, ""]
    for i, option in enumerate(state.options):
        marker = ">" if i == state.cursor else " "
        lines.append(f"{marker} {option}")
    lines.extend(["", FOOTER])
    return "\n".join(lines)


class RepositorySelector(App[str | None]):
    """Single-column menu; exits with the chosen name or None."""

    CSS = """
    #menu {
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding(key, f"handle_key('{key}')", show=False, priority=True)
        for key in KEY_ACTIONS
    ]

    def __init__(self, state: SelectionState) -> None:
        super().__init__()
        self.state = state

    def compose(self) -> ComposeResult:
        yield Static(render_menu(self.state), id="menu", markup=False)

    def action_handle_key(self, key: str) -> None:
        self.state.apply(decode_key(key))
        if self.state.finished:
            self.exit(self.state.selected)
            return
        self.query_one("#menu", Static).update(render_menu(self.state))


def select(options: Sequence[str], inline: bool = True) -> str | None:
    """Show the menu and block until the user confirms or cancels.

    Args:
        options: Names to choose from. Must not be empty.
        inline: Render below the prompt instead of taking over the screen.

    Returns:
        The chosen name, or None if the user cancelled.

    Raises:
        ValueError: ``options`` is empty.
        SelectorDriverError: Textual failed to start or crashed.
    """
    state = SelectionState(list(options))
    app = RepositorySelector(state)

    try:
        result = app.run(inline=inline)
    except Exception as e:
        raise SelectorDriverError(f"Interactive menu failed: {e}") from e

    if app.return_code:
        raise SelectorDriverError(
            f"Interactive menu exited with status {app.return_code}"
        )

    return result
