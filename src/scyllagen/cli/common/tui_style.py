"""prompt_toolkit styles for the questionary prompts.

Table pickers use the cyan/green palette of the rich console theme, so a
picker reads like the `[title]` and `[ok]` lines around it. Overwrite
confirmations are yellow like `[warn]`.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

_MUTED = "ansibrightblack"

# Classes every prompt shares; see questionary's DEFAULT_STYLE for the names.
_BASE = {
    "qmark": "bold",
    "separator": _MUTED,
    "instruction": f"italic {_MUTED}",
    "disabled": _MUTED,
    "validation-toolbar": "bold ansired",
}


def prompt_style(question: str, accent: str, *, checkbox: bool = False) -> Style:
    """Build a prompt style: `question` colours the prompt, `accent` the answer and cursor."""
    rules = {
        **_BASE,
        "question": f"bold {question}",
        "answer": f"bold {accent}",
        "pointer": f"bold {accent}",
        "highlighted": f"bold {accent}",
    }
    if checkbox:
        rules.update(
            {
                "selected": accent,
                "checkbox": _MUTED,
                "checkbox-selected": f"bold {accent}",
            }
        )
    return Style.from_dict(rules)


QUESTIONARY_STYLE_SELECT = prompt_style("ansicyan", "ansigreen", checkbox=True)
QUESTIONARY_STYLE_CONFIRM = prompt_style("ansiyellow", "ansiyellow")
