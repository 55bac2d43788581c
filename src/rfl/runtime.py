from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from rfl.analytics import ExportService, LineupAnalyticsStore
from rfl.contracts import (
    ActionRequest,
    ActionResult,
    ActionType,
    Notification,
    RandomSource,
    RejectReason,
)
from rfl.core import EventBus, RuntimeSettings, StorageError, seeded_random, session_random
from rfl.lineup import (
    FORMATIONS,
    LineupSession,
    LineupStore,
    Roster,
    RosterClient,
    RosterProvider,
    auto_fill,
    describe_candidates,
    get_formation,
)
from rfl.persistence import KeyValueStorage, SqliteStorage

logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    pass


class LineupRuntime:
    def __init__(
        self,
        settings: RuntimeSettings,
        storage: KeyValueStorage | None = None,
        roster: Roster | None = None,
        provider: RosterProvider | None = None,
        rand: RandomSource | None = None,
    ) -> None:
        self.settings = settings
        self.rand = rand or (seeded_random(settings.seed) if settings.seed is not None else session_random())
        self.event_bus = EventBus()

        if storage is None:
            sqlite_storage = SqliteStorage(settings.paths.storage_path)
            sqlite_storage.initialize_schema()
            storage = sqlite_storage
        self.store = LineupStore(storage, key=settings.storage_key, min_filled=settings.min_filled_slots)

        self.provider = provider or RosterProvider(RosterClient(settings.api_url, timeout=settings.http_timeout))
        self.roster = roster if roster is not None else self.provider.load()
        self.session = LineupSession(formation_id=settings.default_formation, min_filled=settings.min_filled_slots)

    def handle_action(self, request: ActionRequest) -> ActionResult:
        try:
            return self._handle_action_core(request)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("rejected malformed %s payload: %s", request.action_type, exc)
            return ActionResult(request.request_id, False, f"invalid payload: {exc}")
        except StorageError as exc:
            logger.error("storage failure during %s: %s", request.action_type, exc)
            return self._notify(request, False, "Storage unavailable", str(exc), "destructive")
        except Exception as exc:
            logger.exception("unhandled failure during %s", request.action_type)
            return ActionResult(request.request_id, False, f"action failed: {exc}")

    def _handle_action_core(self, request: ActionRequest) -> ActionResult:
        try:
            action = ActionType(request.action_type)
        except ValueError:
            return ActionResult(request.request_id, False, f"unknown action '{request.action_type}'")
        handler = getattr(self, f"_on_{action.value}")
        return handler(request, request.payload)

    def _notify(self, request: ActionRequest, success: bool, title: str, description: str, variant: str, data: dict[str, Any] | None = None) -> ActionResult:
        notification = Notification(title, description, variant)
        self.event_bus.publish(notification)
        payload = dict(data or {})
        payload["notification"] = asdict(notification)
        return ActionResult(request.request_id, success, description, payload)

    def _board_result(self, request: ActionRequest, message: str) -> ActionResult:
        return ActionResult(request.request_id, True, message, {"board": self.session.board()})

    def _on_list_formations(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        formations = [{"id": f.formation_id, "name": f.name, "rows": [list(r) for r in f.rows]} for f in FORMATIONS]
        return ActionResult(request.request_id, True, "formations listed", {"formations": formations, "current": self.session.formation_id})

    def _on_select_formation(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        formation_id = _str_field(payload, "formation_id")
        if get_formation(formation_id) is None:
            return ActionResult(request.request_id, False, f"unknown formation '{formation_id}'")
        self.session.select_formation(formation_id)
        return self._board_result(request, f"formation set to {formation_id}")

    def _on_get_board(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        return self._board_result(request, "board state")

    def _on_search_players(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        term = str(payload.get("term", ""))
        players = [p.to_record() for p in self.roster.search(term)]
        return ActionResult(request.request_id, True, f"{len(players)} players", {"players": players})

    def _on_list_candidates(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        slot = _int_field(payload, "slot")
        players = self.roster.search(str(payload.get("term", "")))
        views = describe_candidates(slot, players, self.session.assignment)
        candidates = [{"player": v.player.to_record(), "selectable": v.selectable, "label": v.label} for v in views]
        return ActionResult(request.request_id, True, f"{len(candidates)} candidates", {"slot": slot, "candidates": candidates})

    def _on_assign_player(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        slot = _int_field(payload, "slot")
        player = self.roster.find_player(_str_field(payload, "player_id"))
        if player is None:
            return ActionResult(request.request_id, False, f"unknown player '{payload['player_id']}'")

        check = self.session.try_assign(slot, player)
        if check.accepted:
            return self._board_result(request, f"{player.name} assigned to position {slot + 1}")

        data = {
            "reason": check.reason.value if check.reason else None,
            "existing_slot": check.existing_slot,
            "display_slot": check.display_slot,
            "board": self.session.board(),
        }
        if check.reason == RejectReason.ALREADY_SELECTED:
            return self._notify(request, False, "Player Already Selected", check.message, "destructive", data)
        if check.reason == RejectReason.WRONG_POSITION:
            return self._notify(request, False, "Wrong Position", check.message, "warning", data)
        return self._notify(request, False, "Invalid Position", check.message, "warning", data)

    def _on_unassign_player(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        slot = _int_field(payload, "slot")
        removed = self.session.remove(slot)
        return ActionResult(request.request_id, True, f"position {slot + 1} {'cleared' if removed else 'already empty'}", {"board": self.session.board()})

    def _on_clear_board(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        self.session.clear()
        return self._board_result(request, "board cleared")

    def _on_suggest_teams(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        count = int(payload.get("count", self.settings.suggestion_count))
        teams = self.roster.suggest_teams(self.rand, count)
        return ActionResult(request.request_id, True, f"{len(teams)} teams suggested", {"teams": [asdict(t) for t in teams]})

    def _on_auto_fill(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        team = self.roster.find_team(_str_field(payload, "team"))
        if team is None:
            return ActionResult(request.request_id, False, f"unknown team '{payload['team']}'")
        formation = self.session.current_formation()
        if formation is None:
            return ActionResult(request.request_id, False, f"no current formation ('{self.session.formation_id}')")

        result = auto_fill(team, formation, self.roster.players, self.rand, self.session.assignment)
        if result.no_players:
            return self._notify(request, False, "No Players", f"No players found for {team.name}", "warning", {"board": self.session.board()})

        self.session.replace(result.assignment, result.suggested_name)
        return self._notify(
            request,
            True,
            "Lineup Pre-filled",
            f"{team.name} lineup created with {result.filled} players",
            "success",
            {"board": self.session.board(), "filled": result.filled},
        )

    def _on_save_lineup(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        raw_name = payload.get("name")
        name = self.session.lineup_name if raw_name is None else str(raw_name)
        outcome = self.store.save(name, self.session.formation_id, self.session.assignment)
        if not outcome.accepted or outcome.lineup is None:
            return self._notify(request, False, "Not Enough Players", outcome.message, "warning")
        self.session.has_saved_snapshot = True
        self.session.lineup_name = ""
        return self._notify(request, True, "Lineup Saved", outcome.message, "success", {"lineup": outcome.lineup.to_record()})

    def _on_load_lineup(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        outcome = self.store.load(_str_field(payload, "lineup_id"), self.roster)
        if not outcome.accepted or outcome.lineup is None:
            return ActionResult(request.request_id, False, outcome.message)
        self.session.restore(outcome.lineup)
        return self._notify(
            request,
            True,
            "Lineup Loaded",
            outcome.message,
            "success",
            {"board": self.session.board(), "stale_slots": outcome.stale_slots},
        )

    def _on_delete_lineup(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        lineup_id = _str_field(payload, "lineup_id")
        if not self.store.delete(lineup_id):
            return ActionResult(request.request_id, False, f"No saved lineup with id '{lineup_id}'.")
        return self._notify(request, True, "Lineup Deleted", "The lineup has been removed.", "default")

    def _on_list_lineups(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        lineups = [
            {
                "id": lineup.lineup_id,
                "name": lineup.name,
                "formation": lineup.formation_id,
                "players": len(lineup.players),
                "createdAt": lineup.created_at,
            }
            for lineup in self.store.list_all()
        ]
        return ActionResult(request.request_id, True, f"{len(lineups)} saved lineups", {"lineups": lineups})

    def _on_reload_roster(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        self.roster = self.provider.load()
        return ActionResult(
            request.request_id,
            not self.roster.is_empty,
            f"roster has {len(self.roster.players)} players and {len(self.roster.teams)} teams",
            {"players": len(self.roster.players), "teams": len(self.roster.teams)},
        )

    def _on_export_analytics(self, request: ActionRequest, payload: dict[str, Any]) -> ActionResult:
        paths = self.settings.paths
        analytics = LineupAnalyticsStore(paths.duckdb_path)
        analytics.refresh(self.roster, self.store.list_all())
        outputs = ExportService(paths.duckdb_path).export_datasets(paths.export_dir)
        return ActionResult(
            request.request_id,
            True,
            f"exported {len(outputs)} files",
            {
                "outputs": [str(p) for p in outputs],
                "lineups": analytics.lineup_summaries(),
                "team_depth": analytics.team_position_depth(),
            },
        )


def _int_field(payload: dict[str, Any], key: str) -> int:
    if key not in payload:
        raise PayloadError(f"missing '{key}'")
    value = payload[key]
    if isinstance(value, bool):
        raise PayloadError(f"'{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"'{key}' must be an integer") from exc


def _str_field(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or str(value) == "":
        raise PayloadError(f"missing '{key}'")
    return str(value)
