from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from rfl.contracts import LoadOutcome, RosterPlayer, SavedLineup, SaveOutcome
from rfl.core import now_ms
from rfl.core.config import DEFAULT_STORAGE_KEY
from rfl.lineup.assignment import filled_count
from rfl.lineup.formations import required_position
from rfl.lineup.roster import Roster
from rfl.persistence import KeyValueStorage

logger = logging.getLogger(__name__)


class LineupStore:
    """Named-lineup CRUD over a single JSON array held in a key-value store.

    The stored list is re-read on every operation so the store never holds
    state of its own beyond the storage handle.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        min_filled: int = 7,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.storage = storage
        self.key = key
        self.min_filled = min_filled
        self.clock = clock

    def _read_records(self) -> list[Any]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("failed to parse saved lineups under '%s': %s", self.key, exc)
            return []
        if not isinstance(records, list):
            logger.warning("saved lineups under '%s' are not a list; ignoring", self.key)
            return []
        return records

    def list_all(self) -> list[SavedLineup]:
        lineups: list[SavedLineup] = []
        for idx, record in enumerate(self._read_records()):
            try:
                lineups.append(SavedLineup.from_record(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("skipping malformed saved lineup #%d: %s", idx, exc)
        return lineups

    def get(self, lineup_id: str) -> SavedLineup | None:
        return next((lineup for lineup in self.list_all() if lineup.lineup_id == lineup_id), None)

    def save(self, name: str, formation_id: str, assignment: Mapping[int, RosterPlayer]) -> SaveOutcome:
        if filled_count(assignment) < self.min_filled:
            return SaveOutcome(False, f"Add at least {self.min_filled} players before saving.")

        records = self._read_records()
        lineup = SavedLineup(
            lineup_id=self._next_id(records),
            name=name.strip() or f"Lineup {len(records) + 1}",
            formation_id=formation_id,
            players=dict(assignment),
            created_at=self.clock(),
        )
        records.append(lineup.to_record())
        self._write(records)
        logger.info("saved lineup %s (%s) with %d players", lineup.lineup_id, lineup.name, len(lineup.players))
        return SaveOutcome(True, f"{lineup.name} has been saved successfully.", lineup)

    def load(self, lineup_id: str, roster: Roster | None = None) -> LoadOutcome:
        lineup = self.get(lineup_id)
        if lineup is None:
            return LoadOutcome(False, f"No saved lineup with id '{lineup_id}'.")
        stale = stale_slots(lineup, roster) if roster is not None and roster.players else []
        if stale:
            logger.info("lineup %s references %d players missing or moved in the current roster", lineup_id, len(stale))
        return LoadOutcome(True, f"{lineup.name} has been loaded.", lineup, stale)

    def delete(self, lineup_id: str) -> bool:
        records = self._read_records()
        remaining = [record for record in records if _record_id(record) != lineup_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.info("deleted lineup %s", lineup_id)
        return True

    def _next_id(self, records: list[Any]) -> str:
        taken = {_record_id(record) for record in records}
        candidate = self.clock()
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _write(self, records: list[Any]) -> None:
        # unparseable records are written back untouched
        self.storage.set_item(self.key, json.dumps(records))


def _record_id(record: Any) -> str | None:
    if isinstance(record, Mapping) and "id" in record:
        return str(record["id"])
    return None


def stale_slots(lineup: SavedLineup, roster: Roster) -> list[int]:
    stale: list[int] = []
    for slot, player in sorted(lineup.players.items()):
        current = roster.find_player(player.player_id)
        if current is None or current.position != required_position(slot):
            stale.append(slot)
    return stale
