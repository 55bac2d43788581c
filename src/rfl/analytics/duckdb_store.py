from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import duckdb

from rfl.contracts import SavedLineup
from rfl.lineup.roster import Roster


class LineupAnalyticsStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mart_roster_teams (
                    team_id VARCHAR PRIMARY KEY,
                    name VARCHAR,
                    short_name VARCHAR
                );

                CREATE TABLE IF NOT EXISTS mart_roster_players (
                    player_id VARCHAR PRIMARY KEY,
                    name VARCHAR,
                    team VARCHAR,
                    position VARCHAR,
                    rating DOUBLE
                );

                CREATE TABLE IF NOT EXISTS mart_lineup_slots (
                    lineup_id VARCHAR,
                    lineup_name VARCHAR,
                    formation_id VARCHAR,
                    created_at BIGINT,
                    slot INTEGER,
                    player_id VARCHAR,
                    player_name VARCHAR,
                    position VARCHAR,
                    rating DOUBLE,
                    PRIMARY KEY(lineup_id, slot)
                );
                """
            )

    def refresh(self, roster: Roster, lineups: Iterable[SavedLineup]) -> None:
        self.initialize_schema()
        team_rows = [(t.team_id, t.name, t.short_name) for t in roster.teams]
        player_rows = [(p.player_id, p.name, p.team, p.position.value, p.rating) for p in roster.players]
        slot_rows = [
            (
                lineup.lineup_id,
                lineup.name,
                lineup.formation_id,
                lineup.created_at,
                slot,
                player.player_id,
                player.name,
                player.position.value,
                player.rating,
            )
            for lineup in lineups
            for slot, player in sorted(lineup.players.items())
        ]
        with self.connect() as conn:
            conn.execute("DELETE FROM mart_roster_teams")
            conn.execute("DELETE FROM mart_roster_players")
            conn.execute("DELETE FROM mart_lineup_slots")
            if team_rows:
                conn.executemany("INSERT INTO mart_roster_teams VALUES (?, ?, ?)", team_rows)
            if player_rows:
                conn.executemany("INSERT INTO mart_roster_players VALUES (?, ?, ?, ?, ?)", player_rows)
            if slot_rows:
                conn.executemany("INSERT INTO mart_lineup_slots VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)", slot_rows)

    def lineup_summaries(self) -> list[dict[str, Any]]:
        self.initialize_schema()
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT lineup_id, lineup_name, formation_id, COUNT(*) AS players, AVG(rating) AS avg_rating
                FROM mart_lineup_slots
                GROUP BY lineup_id, lineup_name, formation_id, created_at
                ORDER BY created_at, lineup_id
                """
            ).fetchall()
        return [
            {
                "lineup_id": r[0],
                "name": r[1],
                "formation_id": r[2],
                "players": int(r[3]),
                "avg_rating": round(float(r[4]), 2) if r[4] is not None else None,
            }
            for r in rows
        ]

    def team_position_depth(self) -> list[dict[str, Any]]:
        self.initialize_schema()
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT
                    t.name,
                    COUNT(p.player_id) FILTER (WHERE p.position = 'GK') AS gk_count,
                    COUNT(p.player_id) FILTER (WHERE p.position = 'DEF') AS def_count,
                    COUNT(p.player_id) FILTER (WHERE p.position = 'MID') AS mid_count,
                    COUNT(p.player_id) FILTER (WHERE p.position = 'FWD') AS fwd_count
                FROM mart_roster_teams t
                LEFT JOIN mart_roster_players p ON p.team = t.name OR p.team = t.short_name
                GROUP BY t.name
                ORDER BY t.name
                """
            ).fetchall()
        return [{"team": r[0], "GK": int(r[1]), "DEF": int(r[2]), "MID": int(r[3]), "FWD": int(r[4])} for r in rows]
