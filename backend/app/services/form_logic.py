"""
Form logic evaluation

A logic unit fires when every one of its conditions holds against the
respondent's answers. ``showFields`` units reveal fields, ``preventSubmit``
units block the submission.
"""
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

from app.models.form import LogicType


class ConditionState(str, Enum):
    EQUAL = "is equals to"
    MORE_THAN_OR_EQUAL = "is more than or equal to"
    LESS_THAN_OR_EQUAL = "is less than or equal to"
    EITHER = "is either"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _to_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def _values_equal(answer: Any, expected: Any) -> bool:
    answer_number = _to_number(answer)
    expected_number = _to_number(expected)
    if answer_number is not None and expected_number is not None:
        return answer_number == expected_number
    return str(answer).strip() == str(expected).strip()


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def is_condition_fulfilled(condition: Dict[str, Any], answer: Any) -> bool:
    """Whether a single condition holds for the given answer"""
    if _is_empty(answer):
        return False

    state = condition.get("state")
    expected = condition.get("value")
    # Checkbox answers arrive as lists; any selected option may match
    answers = _as_list(answer)

    if state in (ConditionState.EQUAL.value, ConditionState.EITHER.value):
        return any(_values_equal(a, e) for a in answers for e in _as_list(expected))

    if state in (ConditionState.MORE_THAN_OR_EQUAL.value, ConditionState.LESS_THAN_OR_EQUAL.value):
        answer_number = _to_number(answers[0])
        expected_number = _to_number(expected)
        if answer_number is None or expected_number is None:
            return False
        if state == ConditionState.MORE_THAN_OR_EQUAL.value:
            return answer_number >= expected_number
        return answer_number <= expected_number

    return False


def _condition_field_ids(logic: Dict[str, Any]) -> Set[str]:
    return {str(c.get("field")) for c in logic.get("conditions") or []}


def is_logic_unit_satisfied(
    logic: Dict[str, Any],
    form_inputs: Dict[str, Any],
    visible_field_ids: Set[str],
) -> bool:
    """All conditions hold and every field they reference is visible"""
    conditions = logic.get("conditions") or []
    if not conditions:
        return False
    if not _condition_field_ids(logic) <= visible_field_ids:
        return False
    return all(
        is_condition_fulfilled(condition, form_inputs.get(str(condition.get("field"))))
        for condition in conditions
    )


def _logics_of_type(form_logics: Iterable[Dict[str, Any]], logic_type: LogicType) -> List[Dict[str, Any]]:
    return [logic for logic in form_logics or [] if logic.get("logicType") == logic_type.value]


def get_visible_field_ids(
    form_fields: Iterable[Dict[str, Any]],
    form_logics: Iterable[Dict[str, Any]],
    form_inputs: Dict[str, Any],
) -> Set[str]:
    """
    Ids of the fields a respondent can currently see

    Fields no showFields unit targets are always visible. Targeted fields
    become visible once a unit showing them fires; units are re-evaluated
    until the visible set stops growing, so revealed fields can in turn
    satisfy further units.
    """
    show_logics = _logics_of_type(form_logics, LogicType.SHOW_FIELDS)
    all_field_ids = {str(field.get("_id")) for field in form_fields or []}
    targeted = {str(field_id) for logic in show_logics for field_id in logic.get("show") or []}

    visible = all_field_ids - targeted
    changed = True
    while changed:
        changed = False
        for logic in show_logics:
            if not is_logic_unit_satisfied(logic, form_inputs, visible):
                continue
            revealed = {str(field_id) for field_id in logic.get("show") or []} & all_field_ids
            if not revealed <= visible:
                visible |= revealed
                changed = True
    return visible


def get_logic_unit_preventing_submit(
    form_fields: Iterable[Dict[str, Any]],
    form_logics: Iterable[Dict[str, Any]],
    form_inputs: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """First preventSubmit unit that fires, or None when submission is allowed"""
    form_fields = list(form_fields or [])
    form_logics = list(form_logics or [])
    visible = get_visible_field_ids(form_fields, form_logics, form_inputs)
    for logic in _logics_of_type(form_logics, LogicType.PREVENT_SUBMIT):
        if is_logic_unit_satisfied(logic, form_inputs, visible):
            return logic
    return None
