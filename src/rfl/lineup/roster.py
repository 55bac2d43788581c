from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import requests

from rfl.contracts import Position, RandomSource, RosterPlayer, RosterTeam
from rfl.core.errors import RosterUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_IMAGE = "/noFilter.png"
UNKNOWN_TEAM = "Unknown"

API_ENDPOINTS = {
    "players": "/api/admin/players",
    "teams": "/api/admin/teams",
}


def normalize_player(raw: Mapping[str, Any]) -> RosterPlayer:
    team = raw.get("team")
    if isinstance(team, str):
        team_label = team
    elif isinstance(team, Mapping) and team.get("name"):
        team_label = str(team["name"])
    else:
        team_label = UNKNOWN_TEAM
    rating = raw.get("rating")
    short_name = raw.get("short_name")
    return RosterPlayer(
        player_id=str(raw["id"]),
        name=str(raw["name"]),
        image=str(raw.get("image") or DEFAULT_PLAYER_IMAGE),
        team=team_label,
        position=Position(str(raw["position"])),
        rating=float(rating) if rating is not None else None,
        short_name=str(short_name) if short_name else None,
    )


def normalize_team(raw: Mapping[str, Any]) -> RosterTeam:
    return RosterTeam(
        team_id=str(raw["id"]),
        name=str(raw["name"]),
        short_name=str(raw.get("short_name") or raw["name"]),
        logo=str(raw.get("logo") or ""),
        primary_color=str(raw.get("primary_color") or ""),
        secondary_color=str(raw.get("secondary_color") or ""),
    )


@dataclass(slots=True)
class Roster:
    """Read-only snapshot of players and teams, fetched once per runtime."""

    players: list[RosterPlayer] = field(default_factory=list)
    teams: list[RosterTeam] = field(default_factory=list)

    @classmethod
    def from_records(cls, players: Iterable[Mapping[str, Any]], teams: Iterable[Mapping[str, Any]]) -> Roster:
        """Normalize each record on its own; a malformed player is skipped, not fatal."""
        normalized: list[RosterPlayer] = []
        for idx, raw in enumerate(players):
            try:
                normalized.append(normalize_player(raw))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("skipping malformed player #%d: %s", idx, exc)
        return cls(players=normalized, teams=[normalize_team(t) for t in teams])

    @property
    def is_empty(self) -> bool:
        return not self.players and not self.teams

    def find_player(self, player_id: str) -> RosterPlayer | None:
        return next((p for p in self.players if p.player_id == player_id), None)

    def find_team(self, label: str) -> RosterTeam | None:
        for team in self.teams:
            if team.team_id == label or team.matches(label):
                return team
        return None

    def players_for_team(self, team: RosterTeam) -> list[RosterPlayer]:
        return [p for p in self.players if team.matches(p.team)]

    def search(self, term: str) -> list[RosterPlayer]:
        needle = term.lower()
        return [p for p in self.players if needle in p.name.lower() or needle in p.team.lower()]

    def suggest_teams(self, rand: RandomSource, count: int = 5) -> list[RosterTeam]:
        shuffled = list(self.teams)
        rand.shuffle(shuffled)
        return shuffled[:count]


class RosterClient:
    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_collection(self, resource: str) -> list[dict[str, Any]]:
        url = self.base_url + API_ENDPOINTS[resource]
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise RosterUnavailableError(resource, str(exc)) from exc
        except ValueError as exc:
            raise RosterUnavailableError(resource, f"invalid JSON body: {exc}") from exc

        if not isinstance(payload, dict):
            raise RosterUnavailableError(resource, "response body is not an object")
        items = payload.get(resource)
        if items is None:
            return []
        if not isinstance(items, list):
            raise RosterUnavailableError(resource, f"'{resource}' is not a list")
        return items

    def fetch_players(self) -> list[dict[str, Any]]:
        return self._get_collection("players")

    def fetch_teams(self) -> list[dict[str, Any]]:
        return self._get_collection("teams")


class RosterProvider:
    def __init__(self, client: RosterClient) -> None:
        self.client = client

    def load(self) -> Roster:
        """Fetch players and teams; any failure degrades to an empty roster."""
        try:
            raw_players = self.client.fetch_players()
            raw_teams = self.client.fetch_teams()
            roster = Roster.from_records(raw_players, raw_teams)
        except RosterUnavailableError as exc:
            logger.error("failed to fetch roster: %s", exc)
            return Roster()
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("failed to parse roster payload: %s", exc)
            return Roster()
        logger.info("loaded roster with %d players and %d teams", len(roster.players), len(roster.teams))
        return roster
