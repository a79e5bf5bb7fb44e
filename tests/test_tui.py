from types import SimpleNamespace

import pytest
import questionary

from scyllagen.cli import tui
from scyllagen.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_SELECT,
    prompt_style,
)
from scyllagen.cli.tui import select_tables


def _fake_checkbox(answer, captured):
    def checkbox(message, choices, style):
        captured["message"] = message
        captured["titles"] = [c.title for c in choices]
        return SimpleNamespace(ask=lambda: answer)

    return checkbox


def test_select_tables_keeps_list_order(monkeypatch):
    captured = {}
    monkeypatch.setattr(
        tui.questionary, "checkbox", _fake_checkbox(["users", "messages"], captured)
    )

    picked = select_tables(["messages", "users", "events"], keyspace="chat")

    assert picked == ["messages", "users"]
    assert captured["message"] == "Select tables in chat:"
    assert captured["titles"] == ["messages", "users", "events"]


def test_select_tables_cancelled_prompt_returns_empty(monkeypatch):
    monkeypatch.setattr(questionary, "checkbox", _fake_checkbox(None, {}))

    assert select_tables(["messages"]) == []


def _rules(style):
    return dict(style.style_rules)


def test_checkbox_classes_only_in_select_style():
    select, confirm = _rules(QUESTIONARY_STYLE_SELECT), _rules(QUESTIONARY_STYLE_CONFIRM)

    assert select["checkbox-selected"] == "bold ansigreen"
    assert "checkbox-selected" not in confirm
    assert "checkbox" not in confirm
    assert confirm["question"] == "bold ansiyellow"
    assert select["separator"] == confirm["separator"]


@pytest.mark.parametrize("checkbox", [False, True])
def test_prompt_style_colours_question_and_accent(checkbox):
    rules = _rules(prompt_style("ansimagenta", "ansiblue", checkbox=checkbox))

    assert rules["question"] == "bold ansimagenta"
    assert rules["pointer"] == rules["answer"] == "bold ansiblue"
    assert ("checkbox-selected" in rules) is checkbox
