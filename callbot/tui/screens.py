from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import SelectKind, TextKind
from .state import LauncherState, Mode

LineKind = Literal["heading", "param", "options", "description", "text", "hint"]

HELP_TEXT: dict[Mode, str] = {
    "browsing": "Tab: switch column   Up/Down: navigate   Enter: details   q: quit | *: Required",
    "details": "Up/Down: parameter   Left/Right: option   Enter: edit   r: run   Esc: back",
    "editing": "Type to edit   Backspace: delete   Enter: save   Esc: cancel",
}
DETAILS_HINT = " Press r to run or Esc to return to the main page "


@dataclass(frozen=True)
class ColumnView:
    title: str
    labels: tuple[str, ...]
    selected: int | None
    focused: bool


@dataclass(frozen=True)
class OptionChip:
    label: str
    value: str
    selected: bool


@dataclass(frozen=True)
class DetailLine:
    kind: LineKind
    text: str = ""
    focused: bool = False
    editing: bool = False
    options: tuple[OptionChip, ...] = ()


@dataclass(frozen=True)
class ScreenView:
    title: str
    subtitle: str
    mode: Mode
    columns: tuple[ColumnView, ...]
    details_title: str
    details: tuple[DetailLine, ...]
    preview: str
    help_text: str
    status_line: str


def build_column_views(state: LauncherState) -> tuple[ColumnView, ...]:
    return tuple(
        ColumnView(
            title=col.definition.title,
            labels=tuple(a.definition.label for a in col.actions),
            selected=col.selected,
            focused=idx == state.focused_column,
        )
        for idx, col in enumerate(state.columns)
    )


def build_detail_lines(state: LauncherState) -> tuple[DetailLine, ...]:
    action = state.current_action
    if action is None:
        return (DetailLine("text", "No action selected"), DetailLine("hint", DETAILS_HINT))

    lines: list[DetailLine] = []
    if action.definition.description:
        lines.append(DetailLine("description", action.definition.description))
        lines.append(DetailLine("text", ""))

    if not action.params:
        lines.append(DetailLine("text", "No parameters"))
    else:
        lines.append(DetailLine("heading", "Parameters:"))
        for idx, current in enumerate(action.params):
            param = current.definition
            focused = idx == state.focused_parameter
            marker = " *" if param.required else ""
            kind = param.kind
            if isinstance(kind, SelectKind):
                lines.append(DetailLine("param", f"{param.name}{marker}", focused=focused))
                chips = tuple(
                    OptionChip(label=opt.label, value=opt.value, selected=oi == current.selected)
                    for oi, opt in enumerate(kind.options)
                )
                lines.append(DetailLine("options", options=chips, focused=focused))
            elif isinstance(kind, TextKind):
                lines.append(
                    DetailLine(
                        "param",
                        f"{param.name}{marker}: {current.text}",
                        focused=focused,
                        editing=focused and state.editing_text,
                    )
                )
            if param.description:
                lines.append(DetailLine("description", param.description))

    lines.append(DetailLine("text", ""))
    lines.append(DetailLine("hint", DETAILS_HINT))
    return tuple(lines)


def build_screen(state: LauncherState) -> ScreenView:
    action = state.current_action
    details_title = f" {action.definition.label} " if action else " Details "
    return ScreenView(
        title=state.catalog.app.title,
        subtitle=state.catalog.app.subtitle,
        mode=state.mode,
        columns=build_column_views(state),
        details_title=details_title,
        details=build_detail_lines(state) if state.viewing_details else (),
        preview=state.preview,
        help_text=HELP_TEXT[state.mode],
        status_line=state.status_line,
    )


def list_page_size(body_height: int) -> int:
    # Column lists lose two rows to their borders.
    return max(1, body_height - 2)


def scroll_offset(selected: int | None, rows: int) -> int:
    if selected is None or rows <= 0 or selected < rows:
        return 0
    return selected - rows + 1


def details_offset(lines: tuple[DetailLine, ...], rows: int) -> int:
    """First visible detail line such that the focused parameter stays on screen."""
    anchor = None
    for idx, line in enumerate(lines):
        if line.focused:
            anchor = idx
    return scroll_offset(anchor, rows)
