from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from rfl.contracts import ActionRequest, ActionResult, ActionType, Position, RosterPlayer, RosterTeam
from rfl.core import RuntimeSettings, make_id, seeded_random
from rfl.lineup import Roster
from rfl.persistence import MemoryStorage
from rfl.runtime import LineupRuntime


LIONS = RosterTeam("team_lions", "Lions", "LIO", "/lions.png", "#f59f00", "#000000")
EAGLES = RosterTeam("team_eagles", "Eagles", "EAG", "/eagles.png", "#1c7ed6", "#ffffff")
EMPTY_FC = RosterTeam("team_empty", "Empty FC", "EFC")


def make_player(player_id: str, position: Position, team: str = "Lions", rating: float | None = 75.0, name: str | None = None) -> RosterPlayer:
    return RosterPlayer(
        player_id=player_id,
        name=name or f"Player {player_id}",
        image="/noFilter.png",
        team=team,
        position=position,
        rating=rating,
    )


def lions_players() -> list[RosterPlayer]:
    """Exactly one GK, two DEF, three MID and one FWD."""
    return [
        make_player("l_gk", Position.GK, rating=70),
        make_player("l_def1", Position.DEF, rating=72),
        make_player("l_def2", Position.DEF, rating=74),
        make_player("l_mid1", Position.MID, rating=76),
        make_player("l_mid2", Position.MID, rating=78),
        make_player("l_mid3", Position.MID, rating=80),
        make_player("l_fwd", Position.FWD, rating=82),
    ]


def eagles_players() -> list[RosterPlayer]:
    positions: Sequence[Position] = [Position.GK, Position.GK] + [Position.DEF] * 4 + [Position.MID] * 4 + [Position.FWD] * 3
    return [
        make_player(f"e_{idx}", position, team="EAG", name=f"Eagle {idx}")
        for idx, position in enumerate(positions)
    ]


def build_roster() -> Roster:
    return Roster(players=lions_players() + eagles_players(), teams=[LIONS, EAGLES, EMPTY_FC])


def full_assignment() -> dict[int, RosterPlayer]:
    players = lions_players()
    return {slot: player for slot, player in enumerate(players)}


def player_record(player_id: str, name: str, position: str, team: Any = "Lions", **extra: Any) -> dict[str, Any]:
    record = {"id": player_id, "name": name, "position": position, "team": team}
    record.update(extra)
    return record


def build_runtime(tmp_path: Path, seed: int = 7, roster: Roster | None = None, storage: MemoryStorage | None = None) -> LineupRuntime:
    settings = RuntimeSettings(root=tmp_path, seed=seed)
    return LineupRuntime(
        settings,
        storage=storage if storage is not None else MemoryStorage(),
        roster=roster if roster is not None else build_roster(),
        rand=seeded_random(seed),
    )


def act(runtime: LineupRuntime, action: ActionType | str, payload: dict[str, Any] | None = None) -> ActionResult:
    return runtime.handle_action(ActionRequest(make_id("req"), action, payload or {}))
