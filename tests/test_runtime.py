from __future__ import annotations

from rfl.contracts import ActionType, Notification
from rfl.lineup import Roster
from rfl.persistence import MemoryStorage
from tests.helpers import act, build_runtime


def _fill_lions(runtime) -> None:
    result = act(runtime, ActionType.AUTO_FILL, {"team": "Lions"})
    assert result.success, result.message


def test_board_starts_empty_on_default_formation(tmp_path):
    runtime = build_runtime(tmp_path)
    board = act(runtime, ActionType.GET_BOARD).data["board"]
    assert board["formation_id"] == "2-3-1"
    assert board["has_formation"]
    assert board["filled"] == 0
    assert board["state"] == "empty"
    assert [len(row) for row in board["rows"]] == [1, 2, 3, 1]


def test_list_and_select_formation(tmp_path):
    runtime = build_runtime(tmp_path)
    listed = act(runtime, ActionType.LIST_FORMATIONS)
    assert [f["id"] for f in listed.data["formations"]] == ["2-3-1", "2-2-2", "3-2-1"]

    assert act(runtime, ActionType.SELECT_FORMATION, {"formation_id": "3-2-1"}).success
    assert runtime.session.formation_id == "3-2-1"
    rejected = act(runtime, ActionType.SELECT_FORMATION, {"formation_id": "4-3-3"})
    assert not rejected.success
    assert runtime.session.formation_id == "3-2-1"


def test_assign_wrong_position_emits_warning(tmp_path):
    runtime = build_runtime(tmp_path)
    seen: list[Notification] = []
    runtime.event_bus.subscribe(seen.append)

    result = act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 0, "player_id": "l_mid1"})

    assert not result.success
    assert result.data["reason"] == "wrong position"
    assert result.data["notification"]["title"] == "Wrong Position"
    assert result.data["notification"]["variant"] == "warning"
    assert runtime.session.assignment == {}
    assert seen and seen[0].title == "Wrong Position"


def test_assign_duplicate_reports_existing_position(tmp_path):
    runtime = build_runtime(tmp_path)
    assert act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 1, "player_id": "l_def1"}).success

    result = act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 2, "player_id": "l_def1"})

    assert not result.success
    assert result.data["reason"] == "already selected"
    assert result.data["display_slot"] == 2
    assert result.data["notification"]["variant"] == "destructive"
    assert set(runtime.session.assignment) == {1}


def test_unassign_and_clear(tmp_path):
    runtime = build_runtime(tmp_path)
    act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 0, "player_id": "l_gk"})
    act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 6, "player_id": "l_fwd"})

    result = act(runtime, ActionType.UNASSIGN_PLAYER, {"slot": 6})
    assert result.success
    assert set(runtime.session.assignment) == {0}

    assert act(runtime, ActionType.CLEAR_BOARD).data["board"]["filled"] == 0


def test_candidates_follow_search_term(tmp_path):
    runtime = build_runtime(tmp_path)
    act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 1, "player_id": "l_def1"})

    result = act(runtime, ActionType.LIST_CANDIDATES, {"slot": 2, "term": "l_def"})

    labels = {row["player"]["id"]: row["label"] for row in result.data["candidates"]}
    assert labels == {"l_def1": "Position 2", "l_def2": None}


def test_auto_fill_then_save_load_delete(tmp_path):
    runtime = build_runtime(tmp_path)
    _fill_lions(runtime)
    board = act(runtime, ActionType.GET_BOARD).data["board"]
    assert board["filled"] == 7
    assert board["state"] == "ready"
    assert runtime.session.lineup_name == "LIO vs Random"

    saved = act(runtime, ActionType.SAVE_LINEUP, {"name": "Test XI"})
    assert saved.success
    lineup_id = saved.data["lineup"]["id"]
    assert runtime.session.has_saved_snapshot

    listed = act(runtime, ActionType.LIST_LINEUPS).data["lineups"]
    assert [(row["name"], row["players"]) for row in listed] == [("Test XI", 7)]

    act(runtime, ActionType.SELECT_FORMATION, {"formation_id": "2-2-2"})
    act(runtime, ActionType.CLEAR_BOARD)
    loaded = act(runtime, ActionType.LOAD_LINEUP, {"lineup_id": lineup_id})
    assert loaded.success
    assert loaded.data["stale_slots"] == []
    assert runtime.session.formation_id == "2-3-1"
    assert len(runtime.session.assignment) == 7
    assert runtime.session.lineup_name == "Test XI"

    assert act(runtime, ActionType.DELETE_LINEUP, {"lineup_id": lineup_id}).success
    assert act(runtime, ActionType.LIST_LINEUPS).data["lineups"] == []
    assert not act(runtime, ActionType.DELETE_LINEUP, {"lineup_id": lineup_id}).success


def test_save_with_too_few_players_is_a_warning(tmp_path):
    storage = MemoryStorage()
    runtime = build_runtime(tmp_path, storage=storage)
    act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 0, "player_id": "l_gk"})

    result = act(runtime, ActionType.SAVE_LINEUP, {"name": "Thin"})

    assert not result.success
    assert result.data["notification"]["title"] == "Not Enough Players"
    assert storage.get_item("rfl90-lineups") is None


def test_auto_fill_for_team_without_players_keeps_board(tmp_path):
    runtime = build_runtime(tmp_path)
    act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 0, "player_id": "e_0"})
    before = dict(runtime.session.assignment)

    result = act(runtime, ActionType.AUTO_FILL, {"team": "Empty FC"})

    assert not result.success
    assert result.data["notification"]["title"] == "No Players"
    assert runtime.session.assignment == before


def test_auto_fill_needs_known_team_and_formation(tmp_path):
    runtime = build_runtime(tmp_path)
    assert not act(runtime, ActionType.AUTO_FILL, {"team": "Ghosts"}).success

    runtime.session.formation_id = "4-3-3"
    result = act(runtime, ActionType.AUTO_FILL, {"team": "Lions"})
    assert not result.success
    assert "no current formation" in result.message
    assert act(runtime, ActionType.GET_BOARD).data["board"]["has_formation"] is False


def test_suggest_teams_respects_count(tmp_path):
    runtime = build_runtime(tmp_path)
    result = act(runtime, ActionType.SUGGEST_TEAMS, {"count": 2})
    assert len(result.data["teams"]) == 2
    assert len(act(runtime, ActionType.SUGGEST_TEAMS).data["teams"]) == 3


def test_malformed_payloads_and_unknown_actions_fail_softly(tmp_path):
    runtime = build_runtime(tmp_path)
    assert not act(runtime, ActionType.ASSIGN_PLAYER, {"player_id": "l_gk"}).success
    assert not act(runtime, ActionType.ASSIGN_PLAYER, {"slot": "first", "player_id": "l_gk"}).success
    assert not act(runtime, ActionType.ASSIGN_PLAYER, {"slot": 0, "player_id": "ghost"}).success
    unknown = act(runtime, "teleport")
    assert not unknown.success
    assert "unknown action" in unknown.message


def test_reload_roster_uses_provider(tmp_path):
    class StubProvider:
        def __init__(self) -> None:
            self.calls = 0

        def load(self) -> Roster:
            self.calls += 1
            return Roster()

    runtime = build_runtime(tmp_path)
    stub = StubProvider()
    runtime.provider = stub

    result = act(runtime, ActionType.RELOAD_ROSTER)

    assert stub.calls == 1
    assert not result.success
    assert runtime.roster.is_empty
    assert not act(runtime, ActionType.AUTO_FILL, {"team": "Lions"}).success


def test_saved_flag_tracks_board_edits(tmp_path):
    runtime = build_runtime(tmp_path)
    act(runtime, ActionType.AUTO_FILL, {"team": "Lions"})
    saved = act(runtime, ActionType.SAVE_LINEUP, {"name": "Kept"})
    assert act(runtime, ActionType.GET_BOARD).data["board"]["saved"] is True

    act(runtime, ActionType.UNASSIGN_PLAYER, {"slot": 6})
    assert act(runtime, ActionType.GET_BOARD).data["board"]["saved"] is False

    act(runtime, ActionType.LOAD_LINEUP, {"lineup_id": saved.data["lineup"]["id"]})
    assert act(runtime, ActionType.GET_BOARD).data["board"]["saved"] is True

    cleared = act(runtime, ActionType.CLEAR_BOARD)
    assert cleared.data["board"]["saved"] is False

    act(runtime, ActionType.AUTO_FILL, {"team": "Lions"})
    assert act(runtime, ActionType.GET_BOARD).data["board"]["saved"] is False


def test_save_with_null_name_uses_suggested_name(tmp_path):
    runtime = build_runtime(tmp_path)
    act(runtime, ActionType.AUTO_FILL, {"team": "Lions"})

    result = act(runtime, ActionType.SAVE_LINEUP, {"name": None})

    assert result.success
    assert result.data["lineup"]["name"] == "LIO vs Random"
