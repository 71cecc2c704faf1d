"""
Declarative parameter defaults.

Each operation lists the optional parameters it fills in, with the value
used and the note explaining it. Defaults are applied once the caller's
parameters are known, and one Note is produced per field that was
actually defaulted.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, NamedTuple, Sequence, Tuple, Union

from hederakit.transactions.results import Notes

NoteTemplate = Union[str, Callable[[Any], str]]


class ParameterDefault(NamedTuple):
    """
    ``(field, default, note_template)``.

    A string template may reference ``{value}``; a callable receives the
    default value and returns the note.
    """

    field: str
    default: Any
    note_template: NoteTemplate

    def render(self) -> str:
        if callable(self.note_template):
            return self.note_template(self.default)
        return self.note_template.format(value=self.default)


def apply_parameter_defaults(
    params: Dict[str, Any],
    defaults: Sequence[ParameterDefault],
) -> Tuple[Dict[str, Any], Notes]:
    """
    Fill absent parameters and report each default applied.

    A parameter counts as absent when the key is missing or its value is
    None. The input mapping is not modified.

    Example:
        >>> params, notes = apply_parameter_defaults(
        ...     {"token_name": "GameGold"},
        ...     [ParameterDefault("decimals", 0, "Decimals set to '{value}'.")],
        ... )
        >>> params["decimals"], notes.as_list()
        (0, ["Decimals set to '0'."])
    """
    filled = dict(params)
    notes = Notes()
    for rule in defaults:
        if filled.get(rule.field) is None:
            filled[rule.field] = rule.default
            notes.add(rule.render())
    return filled, notes
