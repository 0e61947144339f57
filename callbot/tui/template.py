from __future__ import annotations

from typing import Sequence

from .models import Action, ActionState


def substitute(action: Action, values: Sequence[str]) -> str:
    """Replace each parameter's placeholder in the action template.

    ``values`` is positionally aligned with ``action.parameters``. Parameters
    are applied in declaration order with a plain ``str.replace``, so a
    placeholder that does not occur in the template leaves the output alone.
    """
    out = action.template
    for param, value in zip(action.parameters, values):
        if not param.placeholder:
            continue
        out = out.replace(param.placeholder, value)
    return out


def render_command(action_state: ActionState) -> str:
    return substitute(action_state.definition, [p.value for p in action_state.params])


def missing_required(action_state: ActionState) -> list[str]:
    return [p.definition.name for p in action_state.params if p.is_missing]
