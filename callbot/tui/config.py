from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from .models import Action, AppInfo, Catalog, Column, LoadError, ParamOption, Parameter, SelectKind, TextKind

CONFIG_ENV = "CALLBOT_CONFIG"
CONFIG_NAME = "config.toml"


def resolve_config_path(explicit: str | Path | None = None) -> Path:
    candidates: list[Path] = []
    if explicit:
        candidates.append(Path(explicit).expanduser())
    env_path = os.environ.get(CONFIG_ENV, "").strip()
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.append(Path.cwd() / CONFIG_NAME)
    candidates.append(Path(__file__).resolve().parents[1] / CONFIG_NAME)
    candidates.append(Path.home() / ".config" / "callbot" / CONFIG_NAME)

    if explicit or env_path:
        # A path the operator named is reported as missing rather than replaced.
        return candidates[0]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return candidates[0]


def load_catalog(path: str | Path) -> Catalog:
    path = Path(path)
    if not path.exists():
        raise LoadError(
            f"Configuration file not found: {path}\n"
            f"Please create a {CONFIG_NAME} file or pass --config PATH.",
            path,
        )
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Failed to read config file '{path}': {exc}", path) from exc
    return parse_catalog(content, path)


def parse_catalog(content: str, path: Path | None = None) -> Catalog:
    where = str(path) if path else "<string>"
    try:
        raw = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise LoadError(f"Failed to parse config file '{where}': {exc}", path) from exc

    try:
        catalog = _build_catalog(raw, path)
    except LoadError as exc:
        exc.path = path
        raise
    validate_catalog(catalog)
    return catalog


def validate_catalog(catalog: Catalog) -> None:
    if not catalog.columns:
        raise LoadError("Configuration must have at least one column", catalog.source)

    seen: set[str] = set()
    for column in catalog.columns:
        if not column.id:
            raise LoadError("Column id cannot be empty", catalog.source)
        if column.id in seen:
            raise LoadError(f"Duplicate column id '{column.id}'", catalog.source)
        seen.add(column.id)
        if not column.title:
            raise LoadError(f"Column '{column.id}' must have a title", catalog.source)
        if not column.actions:
            raise LoadError(f"Column '{column.id}' must have at least one action", catalog.source)

        for action in column.actions:
            if not action.label:
                raise LoadError(f"Action in column '{column.id}' must have a label", catalog.source)
            if not action.template:
                raise LoadError(
                    f"Action '{action.label}' in column '{column.id}' must have a template",
                    catalog.source,
                )
            for param in action.parameters:
                if not param.name:
                    raise LoadError(f"Parameter in action '{action.label}' must have a name", catalog.source)
                if not param.placeholder:
                    raise LoadError(
                        f"Parameter '{param.name}' in action '{action.label}' must have a placeholder",
                        catalog.source,
                    )
                if isinstance(param.kind, SelectKind) and not param.kind.options:
                    raise LoadError(
                        f"Parameter '{param.name}' in action '{action.label}' is type 'select' but has no options",
                        catalog.source,
                    )


def _build_catalog(raw: dict[str, Any], path: Path | None) -> Catalog:
    app_raw = _table(raw, "app", "configuration", required=True)
    app = AppInfo(
        title=_string(app_raw, "title", "app", required=True),
        subtitle=_string(app_raw, "subtitle", "app", required=True),
    )
    columns = tuple(
        _build_column(col, idx) for idx, col in enumerate(_array(raw, "columns", "configuration"))
    )
    return Catalog(app=app, columns=columns, source=path)


def _build_column(raw: Any, idx: int) -> Column:
    where = f"columns[{idx}]"
    if not isinstance(raw, dict):
        raise LoadError(f"Field '{where}' must be a table")
    return Column(
        id=_string(raw, "id", where),
        title=_string(raw, "title", where),
        actions=tuple(
            _build_action(act, f"{where}.actions[{aidx}]")
            for aidx, act in enumerate(_array(raw, "actions", where))
        ),
    )


def _build_action(raw: Any, where: str) -> Action:
    if not isinstance(raw, dict):
        raise LoadError(f"Field '{where}' must be a table")
    return Action(
        label=_string(raw, "label", where),
        template=_string(raw, "template", where),
        description=_optional_string(raw, "description", where),
        parameters=tuple(
            _build_parameter(param, f"{where}.parameters[{pidx}]")
            for pidx, param in enumerate(_array(raw, "parameters", where))
        ),
    )


def _build_parameter(raw: Any, where: str) -> Parameter:
    if not isinstance(raw, dict):
        raise LoadError(f"Field '{where}' must be a table")
    param_type = _optional_string(raw, "param_type", where) or "text"
    options = tuple(
        _build_option(opt, f"{where}.options[{oidx}]") for oidx, opt in enumerate(_array(raw, "options", where))
    )
    if param_type == "select":
        kind: TextKind | SelectKind = SelectKind(options=options)
    elif param_type == "text":
        kind = TextKind()
    else:
        raise LoadError(f"Field '{where}.param_type' must be 'text' or 'select', got '{param_type}'")

    required = raw.get("required", False)
    if not isinstance(required, bool):
        raise LoadError(f"Field '{where}.required' must be a boolean")

    return Parameter(
        name=_string(raw, "name", where),
        placeholder=_string(raw, "placeholder", where),
        kind=kind,
        required=required,
        description=_optional_string(raw, "description", where),
        default=_optional_string(raw, "default", where),
    )


def _build_option(raw: Any, where: str) -> ParamOption:
    if not isinstance(raw, dict):
        raise LoadError(f"Field '{where}' must be a table")
    return ParamOption(value=_string(raw, "value", where, required=True), label=_string(raw, "label", where, required=True))


def _table(raw: dict[str, Any], key: str, where: str, required: bool = False) -> dict[str, Any]:
    if key not in raw:
        if required:
            raise LoadError(f"Missing table '{key}' in {where}")
        return {}
    value = raw[key]
    if not isinstance(value, dict):
        raise LoadError(f"Field '{key}' in {where} must be a table")
    return value


def _array(raw: dict[str, Any], key: str, where: str) -> list[Any]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise LoadError(f"Field '{where}.{key}' must be an array")
    return value


def _string(raw: dict[str, Any], key: str, where: str, required: bool = False) -> str:
    if key not in raw:
        if required:
            raise LoadError(f"Missing field '{where}.{key}'")
        # Empty values fall through to validate_catalog for a precise message.
        return ""
    value = raw[key]
    if not isinstance(value, str):
        raise LoadError(f"Field '{where}.{key}' must be a string")
    return value


def _optional_string(raw: dict[str, Any], key: str, where: str) -> str | None:
    if key not in raw:
        return None
    value = raw[key]
    if not isinstance(value, str):
        raise LoadError(f"Field '{where}.{key}' must be a string")
    return value
