"""
Unit tests for form logic evaluation
"""
import pytest

from app.services.form_logic import (ConditionState,
                                     get_logic_unit_preventing_submit,
                                     get_visible_field_ids,
                                     is_condition_fulfilled,
                                     is_logic_unit_satisfied)

FIELDS = [
    {"_id": "age", "fieldType": "number", "title": "Age"},
    {"_id": "country", "fieldType": "dropdown", "title": "Country"},
    {"_id": "reason", "fieldType": "textarea", "title": "Reason"},
    {"_id": "details", "fieldType": "textarea", "title": "Details"},
]


def _condition(field, state, value):
    return {"field": field, "state": state.value, "value": value}


def _show(conditions, show, logic_id="show-1"):
    return {"_id": logic_id, "logicType": "showFields", "conditions": conditions, "show": show}


def _prevent(conditions, message="Not eligible", logic_id="prevent-1"):
    return {
        "_id": logic_id,
        "logicType": "preventSubmit",
        "conditions": conditions,
        "preventSubmitMessage": message,
    }


class TestIsConditionFulfilled:

    @pytest.mark.parametrize("state, expected, answer, result", [
        (ConditionState.EQUAL, "Singapore", "Singapore", True),
        (ConditionState.EQUAL, "Singapore", "Malaysia", False),
        (ConditionState.EQUAL, 18, "18.0", True),
        (ConditionState.MORE_THAN_OR_EQUAL, 18, "18", True),
        (ConditionState.MORE_THAN_OR_EQUAL, 18, "17", False),
        (ConditionState.LESS_THAN_OR_EQUAL, 18, 12, True),
        (ConditionState.LESS_THAN_OR_EQUAL, 18, "19", False),
        (ConditionState.MORE_THAN_OR_EQUAL, 18, "eighteen", False),
        (ConditionState.EITHER, ["Yes", "Maybe"], "Maybe", True),
        (ConditionState.EITHER, ["Yes", "Maybe"], "No", False),
        (ConditionState.EQUAL, "Yes", ["No", "Yes"], True),
    ])
    def test_states(self, state, expected, answer, result):
        assert is_condition_fulfilled(_condition("f", state, expected), answer) is result

    @pytest.mark.parametrize("answer", [None, "", "   ", []])
    def test_empty_answer_never_fulfils(self, answer):
        assert is_condition_fulfilled(_condition("f", ConditionState.EQUAL, ""), answer) is False

    def test_unknown_state(self):
        assert is_condition_fulfilled({"field": "f", "state": "is like", "value": "x"}, "x") is False


class TestIsLogicUnitSatisfied:

    def test_requires_all_conditions(self):
        logic = _prevent([
            _condition("age", ConditionState.LESS_THAN_OR_EQUAL, 17),
            _condition("country", ConditionState.EQUAL, "Singapore"),
        ])
        visible = {"age", "country"}

        assert is_logic_unit_satisfied(logic, {"age": "16", "country": "Singapore"}, visible)
        assert not is_logic_unit_satisfied(logic, {"age": "16", "country": "Malaysia"}, visible)

    def test_hidden_condition_field_blocks_unit(self):
        logic = _prevent([_condition("age", ConditionState.LESS_THAN_OR_EQUAL, 17)])

        assert not is_logic_unit_satisfied(logic, {"age": "16"}, visible_field_ids=set())

    def test_unit_without_conditions_never_fires(self):
        assert not is_logic_unit_satisfied(_prevent([]), {}, {"age"})


class TestGetVisibleFieldIds:

    def test_untargeted_fields_are_visible(self):
        assert get_visible_field_ids(FIELDS, [], {}) == {"age", "country", "reason", "details"}

    def test_targeted_field_hidden_until_shown(self):
        logics = [_show([_condition("country", ConditionState.EQUAL, "Other")], ["reason"])]

        assert "reason" not in get_visible_field_ids(FIELDS, logics, {"country": "Singapore"})
        assert "reason" in get_visible_field_ids(FIELDS, logics, {"country": "Other"})

    def test_chained_show_logic(self):
        logics = [
            _show([_condition("reason", ConditionState.EQUAL, "Work")], ["details"], logic_id="show-2"),
            _show([_condition("country", ConditionState.EQUAL, "Other")], ["reason"]),
        ]
        inputs = {"country": "Other", "reason": "Work"}

        assert get_visible_field_ids(FIELDS, logics, inputs) == {"age", "country", "reason", "details"}

    def test_answer_to_hidden_field_does_not_reveal_chain(self):
        logics = [
            _show([_condition("reason", ConditionState.EQUAL, "Work")], ["details"], logic_id="show-2"),
            _show([_condition("country", ConditionState.EQUAL, "Other")], ["reason"]),
        ]
        inputs = {"country": "Singapore", "reason": "Work"}

        assert get_visible_field_ids(FIELDS, logics, inputs) == {"age", "country"}


class TestGetLogicUnitPreventingSubmit:

    def test_returns_firing_unit(self):
        prevent = _prevent([_condition("age", ConditionState.LESS_THAN_OR_EQUAL, 17)])

        assert get_logic_unit_preventing_submit(FIELDS, [prevent], {"age": 16}) == prevent

    def test_returns_none_when_nothing_fires(self):
        prevent = _prevent([_condition("age", ConditionState.LESS_THAN_OR_EQUAL, 17)])

        assert get_logic_unit_preventing_submit(FIELDS, [prevent], {"age": 30}) is None

    def test_ignores_units_on_hidden_fields(self):
        logics = [
            _show([_condition("country", ConditionState.EQUAL, "Other")], ["reason"]),
            _prevent([_condition("reason", ConditionState.EQUAL, "Tourism")]),
        ]

        assert get_logic_unit_preventing_submit(
            FIELDS, logics, {"country": "Singapore", "reason": "Tourism"}
        ) is None
        assert get_logic_unit_preventing_submit(
            FIELDS, logics, {"country": "Other", "reason": "Tourism"}
        ) is not None

    def test_first_firing_unit_wins(self):
        first = _prevent([_condition("age", ConditionState.MORE_THAN_OR_EQUAL, 0)], logic_id="a")
        second = _prevent([_condition("age", ConditionState.MORE_THAN_OR_EQUAL, 0)], logic_id="b")

        assert get_logic_unit_preventing_submit(FIELDS, [first, second], {"age": 1})["_id"] == "a"

    def test_empty_form(self):
        assert get_logic_unit_preventing_submit([], [], {}) is None
