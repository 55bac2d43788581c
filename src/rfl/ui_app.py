from __future__ import annotations

import argparse
from pathlib import Path

from rfl.cli import load_roster_file
from rfl.core import RuntimeSettings, configure_logging
from rfl.runtime import LineupRuntime
from rfl.ui import launch_ui


def main() -> None:
    parser = argparse.ArgumentParser(description="RFL 90' lineup builder desktop launcher")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="runtime root directory")
    parser.add_argument("--seed", type=int, default=None, help="seed for deterministic auto-fill")
    parser.add_argument("--api-url", default=None, help="base URL serving the roster API")
    parser.add_argument("--roster-file", type=Path, default=None, help="JSON roster file instead of the API")
    args = parser.parse_args()

    settings = RuntimeSettings.from_env(args.root).with_overrides(api_url=args.api_url, seed=args.seed)
    configure_logging(settings.log_level, settings.paths.log_dir)
    roster = load_roster_file(args.roster_file) if args.roster_file else None
    launch_ui(LineupRuntime(settings, roster=roster))


if __name__ == "__main__":
    main()
