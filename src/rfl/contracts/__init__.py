from .types import (
    ActionRequest,
    ActionResult,
    ActionType,
    Assignment,
    AssignmentCheck,
    AutoFillResult,
    CandidateView,
    Formation,
    LoadOutcome,
    Notification,
    Position,
    RandomSource,
    RejectReason,
    RosterPlayer,
    RosterTeam,
    SavedLineup,
    SaveOutcome,
    SessionState,
)

__all__ = [
    "ActionRequest",
    "ActionResult",
    "ActionType",
    "Assignment",
    "AssignmentCheck",
    "AutoFillResult",
    "CandidateView",
    "Formation",
    "LoadOutcome",
    "Notification",
    "Position",
    "RandomSource",
    "RejectReason",
    "RosterPlayer",
    "RosterTeam",
    "SavedLineup",
    "SaveOutcome",
    "SessionState",
]
