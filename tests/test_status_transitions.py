import itertools

import pytest

from app.core.errors import TransitionError
from app.models import ProjectStatus
from app.services.transitions import (
    STATUS_TRANSITIONS,
    TERMINAL_STATES,
    allowed_targets,
    attempt_transition,
    ensure_transition,
)

ALLOWED_EDGES = {
    (ProjectStatus.active, ProjectStatus.on_hold),
    (ProjectStatus.active, ProjectStatus.completed),
    (ProjectStatus.on_hold, ProjectStatus.active),
    (ProjectStatus.on_hold, ProjectStatus.completed),
}


@pytest.mark.parametrize(
    "current,requested", list(itertools.product(ProjectStatus, repeat=2))
)
def test_every_ordered_pair(current, requested):
    result = attempt_transition(current, requested)
    assert result.allowed is ((current, requested) in ALLOWED_EDGES)
    if result.allowed:
        assert result.reason is None
    else:
        assert result.reason.startswith(
            f"Cannot transition from '{current.value}' to '{requested.value}'"
        )


def test_same_state_is_rejected():
    result = attempt_transition("active", "active")
    assert not result.allowed
    assert result.allowed_targets == ["on_hold", "completed"]


def test_completed_is_terminal():
    assert TERMINAL_STATES == {ProjectStatus.completed}
    assert allowed_targets(ProjectStatus.completed) == []
    result = attempt_transition("completed", "active")
    assert not result.allowed
    assert result.reason.endswith("Allowed transitions: none (terminal state)")


def test_unknown_target_rejected_with_allowed_list():
    result = attempt_transition(ProjectStatus.on_hold, "archived")
    assert not result.allowed
    assert result.requested == "archived"
    assert result.reason == (
        "Cannot transition from 'on_hold' to 'archived'. "
        "Allowed transitions: active, completed"
    )


def test_accepts_plain_strings():
    assert attempt_transition("active", "on_hold").allowed
    assert ensure_transition("on_hold", "completed") is ProjectStatus.completed


def test_ensure_transition_raises_with_targets():
    with pytest.raises(TransitionError) as excinfo:
        ensure_transition(ProjectStatus.active, ProjectStatus.active)
    assert excinfo.value.status_code == 400
    assert excinfo.value.allowed == ["on_hold", "completed"]
    assert excinfo.value.current == "active"


def test_table_covers_every_status():
    assert set(STATUS_TRANSITIONS) == set(ProjectStatus)
    for current, targets in STATUS_TRANSITIONS.items():
        assert current not in targets
