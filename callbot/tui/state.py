from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .focus import FocusState, clamp, edge_index, move_index
from .keys import KeyEvent
from .models import ActionState, Catalog, ColumnState, ParamValue, RunResult, SelectKind, TextKind
from .template import missing_required, render_command

Mode = Literal["browsing", "details", "editing"]
EffectKind = Literal["none", "quit", "run"]


@dataclass(frozen=True)
class Effect:
    kind: EffectKind = "none"
    command: str = ""


NO_EFFECT = Effect()
QUIT = Effect("quit")


@dataclass
class LauncherState:
    catalog: Catalog
    columns: list[ColumnState]
    focus: FocusState
    viewing_details: bool = False
    focused_parameter: int = 0
    editing_text: bool = False
    edit_buffer: str = ""
    edit_original: str = ""
    status_line: str = ""

    @property
    def mode(self) -> Mode:
        if self.editing_text:
            return "editing"
        if self.viewing_details:
            return "details"
        return "browsing"

    @property
    def focused_column(self) -> int:
        return self.focus.current

    @property
    def current_column(self) -> ColumnState | None:
        if not self.columns:
            return None
        return self.columns[self.focused_column]

    @property
    def current_action(self) -> ActionState | None:
        column = self.current_column
        return column.current if column else None

    @property
    def current_param(self) -> ParamValue | None:
        action = self.current_action
        if action is None or not action.params:
            return None
        if not 0 <= self.focused_parameter < len(action.params):
            return None
        return action.params[self.focused_parameter]

    @property
    def preview(self) -> str:
        action = self.current_action
        return render_command(action) if action else ""


def new_launcher_state(catalog: Catalog) -> LauncherState:
    columns = [ColumnState.initial(col) for col in catalog.columns]
    first = next((idx for idx, col in enumerate(columns) if col.actions), 0)
    return LauncherState(
        catalog=catalog,
        columns=columns,
        focus=FocusState(count=len(columns), index=first),
    )


# Navigation


def move_selection(state: LauncherState, delta: int) -> None:
    column = state.current_column
    if column is None:
        return
    column.selected = move_index(column.selected, len(column.actions), delta)


def jump_selection(state: LauncherState, last: bool) -> None:
    column = state.current_column
    if column is None:
        return
    column.selected = edge_index(len(column.actions), last)


def page_selection(state: LauncherState, direction: int, page_size: int) -> None:
    move_selection(state, direction * max(1, page_size))


def focus_next_column(state: LauncherState) -> None:
    state.focus.next()


# Details / edit


def open_details(state: LauncherState) -> bool:
    if state.current_action is None:
        return False
    state.viewing_details = True
    state.focused_parameter = 0
    return True


def close_details(state: LauncherState) -> None:
    # An edit still open at this point is cancelled, never committed.
    if state.editing_text:
        cancel_edit(state)
    state.viewing_details = False


def move_parameter(state: LauncherState, delta: int) -> None:
    action = state.current_action
    if action is None or not action.params:
        return
    state.focused_parameter = clamp(state.focused_parameter + delta, 0, len(action.params) - 1)


def cycle_option(state: LauncherState, delta: int) -> None:
    param = state.current_param
    if param is None:
        return
    kind = param.definition.kind
    if isinstance(kind, SelectKind):
        if not kind.options:
            return
        param.selected = clamp(param.selected + delta, 0, len(kind.options) - 1)
    elif isinstance(kind, TextKind):
        return


def begin_edit(state: LauncherState) -> bool:
    param = state.current_param
    if param is None:
        return False
    kind = param.definition.kind
    if isinstance(kind, TextKind):
        state.edit_original = param.text
        state.edit_buffer = param.text
        state.editing_text = True
        return True
    if isinstance(kind, SelectKind):
        return False
    return False


def edit_append(state: LauncherState, text: str) -> None:
    param = state.current_param
    if not state.editing_text or param is None:
        return
    state.edit_buffer += text
    param.text = state.edit_buffer


def edit_backspace(state: LauncherState) -> None:
    param = state.current_param
    if not state.editing_text or param is None:
        return
    state.edit_buffer = state.edit_buffer[:-1]
    param.text = state.edit_buffer


def commit_edit(state: LauncherState) -> None:
    state.editing_text = False
    state.edit_buffer = ""
    state.edit_original = ""


def cancel_edit(state: LauncherState) -> None:
    param = state.current_param
    if state.editing_text and param is not None:
        param.text = state.edit_original
    state.editing_text = False
    state.edit_buffer = ""
    state.edit_original = ""


def request_run(state: LauncherState) -> Effect:
    action = state.current_action
    if action is None:
        return NO_EFFECT
    missing = missing_required(action)
    if missing:
        state.status_line = f"Parameter '{missing[0]}' is required."
        return NO_EFFECT
    return Effect("run", command=render_command(action))


def note_run_result(state: LauncherState, result: RunResult) -> None:
    state.status_line = result.summary


# Direct setters used by the line-oriented console.


def select_action(state: LauncherState, column: int, action: int) -> bool:
    if not 0 <= column < len(state.columns):
        return False
    target = state.columns[column]
    if not 0 <= action < len(target.actions):
        return False
    close_details(state)
    state.focus.index = column
    target.selected = action
    return True


def set_param_text(state: LauncherState, index: int, text: str) -> None:
    action = state.current_action
    if action is None or not 0 <= index < len(action.params):
        return
    param = action.params[index]
    if isinstance(param.definition.kind, TextKind):
        param.text = text


def set_param_option(state: LauncherState, index: int, option: int) -> None:
    action = state.current_action
    if action is None or not 0 <= index < len(action.params):
        return
    param = action.params[index]
    kind = param.definition.kind
    if isinstance(kind, SelectKind) and kind.options:
        param.selected = clamp(option, 0, len(kind.options) - 1)


# Transition table


def apply_key(state: LauncherState, event: KeyEvent, page_size: int = 1) -> Effect:
    """Apply one key event and return what the event loop should do next."""
    if state.editing_text:
        return _apply_editing(state, event)
    if state.viewing_details:
        return _apply_details(state, event)
    return _apply_browsing(state, event, page_size)


def _apply_browsing(state: LauncherState, event: KeyEvent, page_size: int) -> Effect:
    kind = event.kind
    if kind == "quit":
        return QUIT
    if kind == "switch_column":
        focus_next_column(state)
    elif kind == "up":
        move_selection(state, -1)
    elif kind == "down":
        move_selection(state, 1)
    elif kind == "page_up":
        page_selection(state, -1, page_size)
    elif kind == "page_down":
        page_selection(state, 1, page_size)
    elif kind == "home":
        jump_selection(state, last=False)
    elif kind == "end":
        jump_selection(state, last=True)
    elif kind == "confirm":
        open_details(state)
    return NO_EFFECT


def _apply_details(state: LauncherState, event: KeyEvent) -> Effect:
    kind = event.kind
    if kind == "cancel":
        close_details(state)
    elif kind == "up":
        move_parameter(state, -1)
    elif kind == "down":
        move_parameter(state, 1)
    elif kind == "left":
        cycle_option(state, -1)
    elif kind == "right":
        cycle_option(state, 1)
    elif kind == "confirm":
        begin_edit(state)
    elif kind == "run":
        return request_run(state)
    return NO_EFFECT


def _apply_editing(state: LauncherState, event: KeyEvent) -> Effect:
    kind = event.kind
    if kind == "char":
        edit_append(state, event.char)
    elif kind == "backspace":
        edit_backspace(state)
    elif kind == "confirm":
        commit_edit(state)
    elif kind == "cancel":
        cancel_edit(state)
    return NO_EFFECT

