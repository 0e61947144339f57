from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Union

RunStatus = Literal["ok", "failed", "dry_run"]


@dataclass(frozen=True)
class ParamOption:
    value: str
    label: str


@dataclass(frozen=True)
class TextKind:
    pass


@dataclass(frozen=True)
class SelectKind:
    options: tuple[ParamOption, ...]


ParamKind = Union[TextKind, SelectKind]


@dataclass(frozen=True)
class Parameter:
    name: str
    placeholder: str
    kind: ParamKind = TextKind()
    required: bool = False
    description: str | None = None
    default: str | None = None

    @property
    def options(self) -> tuple[ParamOption, ...]:
        if isinstance(self.kind, SelectKind):
            return self.kind.options
        return ()


@dataclass(frozen=True)
class Action:
    label: str
    template: str
    description: str | None = None
    parameters: tuple[Parameter, ...] = ()


@dataclass(frozen=True)
class Column:
    id: str
    title: str
    actions: tuple[Action, ...] = ()


@dataclass(frozen=True)
class AppInfo:
    title: str
    subtitle: str


@dataclass(frozen=True)
class Catalog:
    app: AppInfo
    columns: tuple[Column, ...]
    source: Path | None = None

    @property
    def action_count(self) -> int:
        return sum(len(col.actions) for col in self.columns)


@dataclass
class ParamValue:
    """Current value of one parameter, kept next to its definition.

    Text parameters hold ``text``; select parameters hold the index of the
    chosen option in ``selected``. ``value`` is what gets substituted.
    """

    definition: Parameter
    text: str = ""
    selected: int = 0

    @classmethod
    def initial(cls, param: Parameter) -> "ParamValue":
        kind = param.kind
        if isinstance(kind, SelectKind):
            selected = 0
            if param.default is not None:
                for idx, opt in enumerate(kind.options):
                    if opt.value == param.default:
                        selected = idx
                        break
            return cls(definition=param, selected=selected)
        if isinstance(kind, TextKind):
            return cls(definition=param, text=param.default or "")
        raise TypeError(f"unknown parameter kind: {kind!r}")

    @property
    def value(self) -> str:
        kind = self.definition.kind
        if isinstance(kind, SelectKind):
            if 0 <= self.selected < len(kind.options):
                return kind.options[self.selected].value
            return ""
        return self.text

    @property
    def is_missing(self) -> bool:
        return self.definition.required and not self.value


@dataclass
class ActionState:
    definition: Action
    params: list[ParamValue] = field(default_factory=list)

    @classmethod
    def initial(cls, action: Action) -> "ActionState":
        return cls(definition=action, params=[ParamValue.initial(p) for p in action.parameters])


@dataclass
class ColumnState:
    definition: Column
    actions: list[ActionState] = field(default_factory=list)
    selected: int | None = None

    @classmethod
    def initial(cls, column: Column) -> "ColumnState":
        actions = [ActionState.initial(a) for a in column.actions]
        return cls(definition=column, actions=actions, selected=0 if actions else None)

    @property
    def current(self) -> ActionState | None:
        if self.selected is None or not self.actions:
            return None
        return self.actions[self.selected]


class LoadError(Exception):
    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


@dataclass
class ExecutionError:
    code: str
    message: str
    command: str
    suggested_fix: str = ""


@dataclass
class RunResult:
    status: RunStatus
    command: str
    exit_code: int = 0
    errors: list[ExecutionError] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if self.status == "dry_run":
            return f"Dry run: {self.command}"
        if self.errors and self.errors[0].code == "E_SPAWN":
            return self.errors[0].message
        return f"Command exited with: {self.exit_code}"
