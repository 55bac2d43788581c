from .assignment import assign, can_assign, describe_candidates, filled_count, slot_of, unassign
from .autofill import auto_fill, team_players
from .formations import FORMATIONS, POSITION_BY_SLOT, formation_ids, get_formation, required_position, validate_catalog
from .roster import Roster, RosterClient, RosterProvider, normalize_player, normalize_team
from .session import LineupSession
from .store import LineupStore, stale_slots

__all__ = [
    "FORMATIONS",
    "LineupSession",
    "LineupStore",
    "POSITION_BY_SLOT",
    "Roster",
    "RosterClient",
    "RosterProvider",
    "assign",
    "auto_fill",
    "can_assign",
    "describe_candidates",
    "filled_count",
    "formation_ids",
    "get_formation",
    "normalize_player",
    "normalize_team",
    "required_position",
    "slot_of",
    "stale_slots",
    "team_players",
    "unassign",
    "validate_catalog",
]
