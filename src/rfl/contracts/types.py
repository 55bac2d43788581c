from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class Position(str, Enum):
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


class RejectReason(str, Enum):
    WRONG_POSITION = "wrong position"
    ALREADY_SELECTED = "already selected"
    UNKNOWN_SLOT = "unknown slot"


class SessionState(str, Enum):
    EMPTY = "empty"
    EDITING = "editing"
    READY = "ready"


class ActionType(str, Enum):
    LIST_FORMATIONS = "list_formations"
    SELECT_FORMATION = "select_formation"
    GET_BOARD = "get_board"
    SEARCH_PLAYERS = "search_players"
    LIST_CANDIDATES = "list_candidates"
    ASSIGN_PLAYER = "assign_player"
    UNASSIGN_PLAYER = "unassign_player"
    CLEAR_BOARD = "clear_board"
    SUGGEST_TEAMS = "suggest_teams"
    AUTO_FILL = "auto_fill"
    SAVE_LINEUP = "save_lineup"
    LOAD_LINEUP = "load_lineup"
    DELETE_LINEUP = "delete_lineup"
    LIST_LINEUPS = "list_lineups"
    RELOAD_ROSTER = "reload_roster"
    EXPORT_ANALYTICS = "export_analytics"


class RandomSource(Protocol):
    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...


@dataclass(frozen=True, slots=True)
class RosterPlayer:
    player_id: str
    name: str
    image: str
    team: str
    position: Position
    rating: float | None = None
    short_name: str | None = None

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.player_id,
            "name": self.name,
            "image": self.image,
            "team": self.team,
            "position": self.position.value,
        }
        if self.rating is not None:
            record["rating"] = self.rating
        if self.short_name is not None:
            record["short_name"] = self.short_name
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> RosterPlayer:
        rating = record.get("rating")
        short_name = record.get("short_name")
        return cls(
            player_id=str(record["id"]),
            name=str(record["name"]),
            image=str(record.get("image") or ""),
            team=str(record.get("team") or ""),
            position=Position(str(record["position"])),
            rating=float(rating) if rating is not None else None,
            short_name=str(short_name) if short_name is not None else None,
        )


@dataclass(frozen=True, slots=True)
class RosterTeam:
    team_id: str
    name: str
    short_name: str
    logo: str = ""
    primary_color: str = ""
    secondary_color: str = ""

    def matches(self, team_label: str) -> bool:
        return team_label == self.name or team_label == self.short_name


@dataclass(frozen=True, slots=True)
class Formation:
    formation_id: str
    name: str
    rows: tuple[tuple[int, ...], ...]

    @property
    def slots(self) -> list[int]:
        return [slot for row in self.rows for slot in row]


Assignment = dict[int, RosterPlayer]


@dataclass(slots=True)
class AssignmentCheck:
    accepted: bool
    reason: RejectReason | None = None
    message: str = ""
    existing_slot: int | None = None

    @property
    def display_slot(self) -> int | None:
        if self.existing_slot is None:
            return None
        return self.existing_slot + 1


@dataclass(slots=True)
class CandidateView:
    player: RosterPlayer
    selectable: bool
    label: str | None = None


@dataclass(slots=True)
class AutoFillResult:
    assignment: Assignment
    filled: int
    no_players: bool = False
    suggested_name: str = ""


@dataclass(slots=True)
class SavedLineup:
    lineup_id: str
    name: str
    formation_id: str
    players: Assignment
    created_at: int

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.lineup_id,
            "name": self.name,
            "formation": self.formation_id,
            "players": {str(slot): player.to_record() for slot, player in sorted(self.players.items())},
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SavedLineup:
        raw_players = record.get("players") or {}
        if not isinstance(raw_players, Mapping):
            raise ValueError("saved lineup players must be an object keyed by slot")
        return cls(
            lineup_id=str(record["id"]),
            name=str(record["name"]),
            formation_id=str(record["formation"]),
            players={int(slot): RosterPlayer.from_record(p) for slot, p in raw_players.items()},
            created_at=int(record["createdAt"]),
        )


@dataclass(slots=True)
class SaveOutcome:
    accepted: bool
    message: str
    lineup: SavedLineup | None = None


@dataclass(slots=True)
class LoadOutcome:
    accepted: bool
    message: str
    lineup: SavedLineup | None = None
    stale_slots: list[int] = field(default_factory=list)


@dataclass(slots=True)
class Notification:
    title: str
    description: str
    variant: str = "default"


@dataclass(slots=True)
class ActionRequest:
    request_id: str
    action_type: ActionType | str
    payload: dict[str, Any]


@dataclass(slots=True)
class ActionResult:
    request_id: str
    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)
