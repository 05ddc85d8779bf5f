"""Project status state machine.

``STATUS_TRANSITIONS`` is the only place the legal edges are defined::

    active    -> on_hold, completed
    on_hold   -> active, completed
    completed -> (terminal)

There are no self-loops: asking for the current status is rejected like
any other edge that is not listed.
"""

from dataclasses import dataclass, field

from app.core.errors import TransitionError
from app.models.project import ProjectStatus

STATUS_TRANSITIONS: dict[ProjectStatus, tuple[ProjectStatus, ...]] = {
    ProjectStatus.active: (ProjectStatus.on_hold, ProjectStatus.completed),
    ProjectStatus.on_hold: (ProjectStatus.active, ProjectStatus.completed),
    ProjectStatus.completed: (),
}

TERMINAL_STATES = frozenset(
    status for status, targets in STATUS_TRANSITIONS.items() if not targets
)


@dataclass(frozen=True)
class Transition:
    current: str
    requested: str
    allowed: bool
    allowed_targets: list[str] = field(default_factory=list)
    reason: str | None = None


def _coerce(value: ProjectStatus | str) -> ProjectStatus | None:
    try:
        return ProjectStatus(value)
    except ValueError:
        return None


def _label(value: ProjectStatus | str) -> str:
    return value.value if isinstance(value, ProjectStatus) else str(value)


def allowed_targets(status: ProjectStatus | str) -> list[ProjectStatus]:
    current = _coerce(status)
    if current is None:
        return []
    return list(STATUS_TRANSITIONS[current])


def attempt_transition(
    current: ProjectStatus | str, requested: ProjectStatus | str
) -> Transition:
    targets = allowed_targets(current)
    target_labels = [t.value for t in targets]
    wanted = _coerce(requested)
    if wanted is not None and wanted in targets:
        return Transition(
            current=_label(current),
            requested=wanted.value,
            allowed=True,
            allowed_targets=target_labels,
        )
    error = TransitionError(_label(current), _label(requested), target_labels)
    return Transition(
        current=error.current,
        requested=error.requested,
        allowed=False,
        allowed_targets=target_labels,
        reason=error.message,
    )


def ensure_transition(
    current: ProjectStatus | str, requested: ProjectStatus | str
) -> ProjectStatus:
    """Return the target status, or raise ``TransitionError`` if it is not reachable."""
    result = attempt_transition(current, requested)
    if not result.allowed:
        raise TransitionError(result.current, result.requested, result.allowed_targets)
    return ProjectStatus(result.requested)
