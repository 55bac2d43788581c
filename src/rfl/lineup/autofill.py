from __future__ import annotations

import logging
from typing import Iterable, Mapping

from rfl.contracts import Assignment, AutoFillResult, Formation, RandomSource, RosterPlayer, RosterTeam
from rfl.lineup.formations import required_position

logger = logging.getLogger(__name__)


def team_players(team: RosterTeam, players: Iterable[RosterPlayer]) -> list[RosterPlayer]:
    return [p for p in players if team.matches(p.team)]


def auto_fill(
    team: RosterTeam,
    formation: Formation,
    players: Iterable[RosterPlayer],
    rand: RandomSource,
    current: Mapping[int, RosterPlayer] | None = None,
) -> AutoFillResult:
    """Build a fresh XI for `team` by random choice among eligible players per slot.

    The result replaces the board; it never merges with `current`. When the
    team has no players, `current` is handed back unchanged with `no_players`
    set.
    """
    pool = team_players(team, players)
    if not pool:
        logger.info("auto-fill found no players for team %s", team.name)
        return AutoFillResult(dict(current or {}), filled=len(current or {}), no_players=True)

    filled: Assignment = {}
    used: set[str] = set()
    for row in formation.rows:
        for slot in row:
            needed = required_position(slot)
            candidates = [p for p in pool if p.position == needed and p.player_id not in used]
            if not candidates:
                continue
            chosen = rand.choice(candidates)
            filled[slot] = chosen
            used.add(chosen.player_id)

    logger.debug("auto-fill for %s filled %d/%d slots", team.name, len(filled), len(formation.slots))
    return AutoFillResult(filled, filled=len(filled), suggested_name=f"{team.short_name} vs Random")
