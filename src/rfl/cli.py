from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from rfl.contracts import ActionRequest, ActionResult, ActionType
from rfl.core import ConfigError, RuntimeSettings, configure_logging, make_id
from rfl.lineup import Roster
from rfl.runtime import LineupRuntime

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RFL 90' lineup builder")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="runtime root directory")
    parser.add_argument("--seed", type=int, default=None, help="seed for deterministic auto-fill")
    parser.add_argument("--api-url", default=None, help="base URL serving /api/admin/players and /api/admin/teams")
    parser.add_argument("--roster-file", type=Path, default=None, help="JSON file with 'players' and 'teams' instead of the API")
    parser.add_argument("--formation", default=None, help="formation id to build on")
    parser.add_argument("--auto-fill", metavar="TEAM", default=None, help="pre-fill the board from one team")
    parser.add_argument("--save", metavar="NAME", default=None, help="save the current board under NAME")
    parser.add_argument("--list", action="store_true", help="list saved lineups")
    parser.add_argument("--load", metavar="ID", default=None, help="load a saved lineup onto the board")
    parser.add_argument("--delete", metavar="ID", default=None, help="delete a saved lineup")
    parser.add_argument("--export", action="store_true", help="export roster and lineup analytics")
    parser.add_argument("--log-level", default=None, help="logging level (default from RFL_LOG_LEVEL or INFO)")
    parser.add_argument("--ui", action="store_true", help="launch Qt desktop UI")
    return parser


def load_roster_file(path: Path) -> Roster:
    data = json.loads(path.read_text(encoding="utf-8"))
    return Roster.from_records(data.get("players", []), data.get("teams", []))


def _dispatch(runtime: LineupRuntime, action: ActionType, payload: dict[str, Any] | None = None) -> ActionResult:
    result = runtime.handle_action(ActionRequest(make_id("req"), action, payload or {}))
    state = "OK" if result.success else "FAIL"
    print(f"[{state}] {action.value}: {result.message}")
    return result


def format_board(board: dict[str, Any]) -> list[str]:
    if not board.get("has_formation"):
        return [f"No current formation ('{board.get('formation_id')}')."]
    lines = [f"Formation {board['formation_id']} | {board['filled']} filled | {board['state']}"]
    for row in reversed(board["rows"]):
        cells = []
        for cell in row:
            player = cell["player"]
            name = player["name"] if player else "-"
            cells.append(f"{cell['display_slot']}:{cell['position']} {name}")
        lines.append("   ".join(cells))
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = RuntimeSettings.from_env(args.root).with_overrides(
            api_url=args.api_url,
            seed=args.seed,
            default_formation=args.formation,
            log_level=args.log_level.upper() if args.log_level else None,
        )
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2
    configure_logging(settings.log_level, settings.paths.log_dir)

    roster = load_roster_file(args.roster_file) if args.roster_file else None
    runtime = LineupRuntime(settings, roster=roster)

    if args.ui:
        from rfl.ui import launch_ui

        launch_ui(runtime)
        return 0

    if args.load:
        _dispatch(runtime, ActionType.LOAD_LINEUP, {"lineup_id": args.load})
    if args.auto_fill:
        _dispatch(runtime, ActionType.AUTO_FILL, {"team": args.auto_fill})
    if args.auto_fill or args.load:
        board = runtime.handle_action(ActionRequest(make_id("req"), ActionType.GET_BOARD, {}))
        for line in format_board(board.data["board"]):
            print(line)
    if args.save is not None:
        _dispatch(runtime, ActionType.SAVE_LINEUP, {"name": args.save})
    if args.delete:
        _dispatch(runtime, ActionType.DELETE_LINEUP, {"lineup_id": args.delete})
    if args.list:
        listed = runtime.handle_action(ActionRequest(make_id("req"), ActionType.LIST_LINEUPS, {}))
        print("Saved lineups:")
        for row in listed.data.get("lineups", []):
            print(f"- {row['id']}: {row['name']} ({row['formation']}, {row['players']} players)")
    if args.export:
        exported = _dispatch(runtime, ActionType.EXPORT_ANALYTICS)
        for path in exported.data.get("outputs", []):
            print(f"- {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
