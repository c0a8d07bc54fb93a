from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from pyappstate.app import AppState
from pyappstate.exceptions import CoercionError, InvalidNameError, NotFoundError, StackUnderflowError
from pyappstate.values import Value
from pyappstate.words import StateWords


@pytest.fixture
def state() -> AppState:
    return AppState()


@pytest.fixture
def words(state: AppState) -> dict[str, Any]:
    return StateWords(state).definitions()


def test_definitions_cover_state_words(words: dict[str, Any]) -> None:
    assert set(words) == {"GET", "SET", "REMOVE-VARIABLE", "GET-APP-STATE-JSON", "DEBUG"}


def test_set_then_get_variable(words: dict[str, Any]) -> None:
    stack: list[Any] = [Value.of(10), Value.of("Score")]
    words["SET"](stack)
    assert stack == []

    stack.append("score")
    words["GET"](stack)
    assert stack == [Value.of(10)]


def test_set_typed_property_from_string(state: AppState, words: dict[str, Any]) -> None:
    words["SET"](["42", "intvalue"])

    assert state.get("IntValue") == Value.of(42)


def test_get_unknown_name_fails(words: dict[str, Any]) -> None:
    with pytest.raises(NotFoundError):
        words["GET"](["nothing"])


def test_remove_variable(state: AppState, words: dict[str, Any]) -> None:
    state.set("tmp", 1)

    words["REMOVE-VARIABLE"](["tmp"])

    assert not state.has("tmp")


def test_get_app_state_json(words: dict[str, Any]) -> None:
    stack: list[Any] = []
    words["GET-APP-STATE-JSON"](stack)

    assert len(stack) == 1
    assert json.loads(stack[0].as_string())["AppName"] == "App"


def test_underflow_leaves_stack_untouched(words: dict[str, Any]) -> None:
    stack: list[Any] = ["only-name"]

    with pytest.raises(StackUnderflowError) as info:
        words["SET"](stack)

    assert info.value.word == "SET"
    assert info.value.expected == 2
    assert info.value.available == 1
    assert stack == ["only-name"]


@pytest.mark.parametrize("name", [[1], {"a": 1}, "", "   "])
def test_set_rejects_bad_name_without_consuming(state: AppState, words: dict[str, Any], name: Any) -> None:
    stack: list[Any] = [Value.of(5), name]

    with pytest.raises(InvalidNameError):
        words["SET"](stack)

    assert stack == [Value.of(5), name]
    assert len(state.variables) == 0


def test_set_rejects_bad_value_without_consuming(state: AppState, words: dict[str, Any]) -> None:
    value = object()
    stack: list[Any] = [value, "score"]

    with pytest.raises(CoercionError):
        words["SET"](stack)

    assert stack == [value, "score"]
    assert not state.has("score")


def test_get_and_remove_reject_bad_name_without_consuming(words: dict[str, Any]) -> None:
    for word in ("GET", "REMOVE-VARIABLE"):
        stack: list[Any] = [[1]]
        with pytest.raises(InvalidNameError):
            words[word](stack)
        assert stack == [[1]]

def test_debug_logs_only_when_enabled(
    state: AppState, words: dict[str, Any], caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="pyappstate.words"):
        words["DEBUG"](["hidden"])
        state.set("DebugEnabled", "true")
        words["DEBUG"](["shown"])

    assert caplog.messages == ["Debug: shown"]
