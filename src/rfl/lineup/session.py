from __future__ import annotations

from dataclasses import dataclass, field

from rfl.contracts import Assignment, AssignmentCheck, Formation, RosterPlayer, SavedLineup, SessionState
from rfl.lineup import assignment as rules
from rfl.lineup.formations import get_formation, required_position


@dataclass(slots=True)
class LineupSession:
    """Editing context for one board: formation, assignment and pending name."""

    formation_id: str
    assignment: Assignment = field(default_factory=dict)
    lineup_name: str = ""
    min_filled: int = 7
    # true only while the board matches the lineup last saved or loaded
    has_saved_snapshot: bool = False

    @property
    def state(self) -> SessionState:
        filled = rules.filled_count(self.assignment)
        if filled == 0:
            return SessionState.EMPTY
        if filled >= self.min_filled:
            return SessionState.READY
        return SessionState.EDITING

    def current_formation(self) -> Formation | None:
        return get_formation(self.formation_id)

    def select_formation(self, formation_id: str) -> Formation | None:
        self.formation_id = formation_id
        return self.current_formation()

    def try_assign(self, slot: int, player: RosterPlayer) -> AssignmentCheck:
        check = rules.can_assign(slot, player, self.assignment)
        if check.accepted:
            self.assignment = rules.assign(slot, player, self.assignment)
            self.has_saved_snapshot = False
        return check

    def remove(self, slot: int) -> bool:
        if slot not in self.assignment:
            return False
        self.assignment = rules.unassign(slot, self.assignment)
        self.has_saved_snapshot = False
        return True

    def replace(self, assignment: Assignment, lineup_name: str | None = None) -> None:
        self.assignment = dict(assignment)
        self.has_saved_snapshot = False
        if lineup_name is not None:
            self.lineup_name = lineup_name

    def restore(self, lineup: SavedLineup) -> None:
        self.formation_id = lineup.formation_id
        self.assignment = dict(lineup.players)
        self.lineup_name = lineup.name
        self.has_saved_snapshot = True

    def clear(self) -> None:
        self.assignment = {}
        self.lineup_name = ""
        self.has_saved_snapshot = False

    def board(self) -> dict:
        formation = self.current_formation()
        rows: list[list[dict]] = []
        if formation is not None:
            for row in formation.rows:
                rows.append([_slot_view(slot, self.assignment.get(slot)) for slot in row])
        return {
            "formation_id": self.formation_id,
            "has_formation": formation is not None,
            "rows": rows,
            "filled": rules.filled_count(self.assignment),
            "state": self.state.value,
            "saved": self.has_saved_snapshot,
            "lineup_name": self.lineup_name,
        }


def _slot_view(slot: int, player: RosterPlayer | None) -> dict:
    position = required_position(slot)
    return {
        "slot": slot,
        "display_slot": slot + 1,
        "position": position.value if position is not None else None,
        "player": player.to_record() if player is not None else None,
    }
