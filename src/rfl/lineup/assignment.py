from __future__ import annotations

from typing import Iterable, Mapping

from rfl.contracts import Assignment, AssignmentCheck, CandidateView, RejectReason, RosterPlayer
from rfl.lineup.formations import required_position


def slot_of(player_id: str, assignment: Mapping[int, RosterPlayer]) -> int | None:
    for slot, occupant in assignment.items():
        if occupant.player_id == player_id:
            return slot
    return None


def filled_count(assignment: Mapping[int, RosterPlayer]) -> int:
    return len(assignment)


def can_assign(slot: int, player: RosterPlayer, assignment: Mapping[int, RosterPlayer]) -> AssignmentCheck:
    """Decide whether `player` may go into `slot` without touching the assignment.

    Rejections carry a reason and a display message; a duplicate rejection also
    names the occupied slot (0-based in `existing_slot`, 1-based via
    `display_slot`).
    """
    needed = required_position(slot)
    if needed is None:
        return AssignmentCheck(False, RejectReason.UNKNOWN_SLOT, f"slot {slot} is not part of any formation")

    if player.position != needed:
        return AssignmentCheck(
            False,
            RejectReason.WRONG_POSITION,
            f"{player.name} is a {player.position.value}, but this position requires a {needed.value}.",
        )

    existing = slot_of(player.player_id, assignment)
    if existing is not None:
        return AssignmentCheck(
            False,
            RejectReason.ALREADY_SELECTED,
            f"{player.name} is already in your squad at position {existing + 1}.",
            existing_slot=existing,
        )
    return AssignmentCheck(True)


def assign(slot: int, player: RosterPlayer, assignment: Mapping[int, RosterPlayer]) -> Assignment:
    updated = dict(assignment)
    updated[slot] = player
    return updated


def unassign(slot: int, assignment: Mapping[int, RosterPlayer]) -> Assignment:
    updated = dict(assignment)
    updated.pop(slot, None)
    return updated


def describe_candidates(
    slot: int,
    players: Iterable[RosterPlayer],
    assignment: Mapping[int, RosterPlayer],
) -> list[CandidateView]:
    needed = required_position(slot)
    views: list[CandidateView] = []
    for player in players:
        existing = slot_of(player.player_id, assignment)
        if player.position != needed:
            views.append(CandidateView(player, False, "Wrong position"))
        elif existing is not None:
            views.append(CandidateView(player, False, f"Position {existing + 1}"))
        else:
            views.append(CandidateView(player, True))
    return views
