from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Optional

from dotenv import load_dotenv

from leaguescout.config import faceit_config_from_env
from leaguescout.errors import FETCH_ERRORS
from leaguescout.reconcile import resolve_team_by_name
from leaguescout.render import render_text

from .api.transformers.summary_transformer import transform_summary_to_frontend
from .application.use_cases.league_summary import LeagueSummaryUseCase
from .infrastructure.adapters.faceit_league_adapter import FaceitLeagueAdapter


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="FACEIT league summary for one team")
    team = parser.add_mutually_exclusive_group(required=True)
    team.add_argument("--team-id", default=None, help="FACEIT team id")
    team.add_argument("--team-name", default=None, help="Team name, resolved in the championship")
    parser.add_argument(
        "--championship-id", default=None, help="Championship id (defaults to LEAGUESCOUT_CHAMPIONSHIP_ID)"
    )
    parser.add_argument("--title", default=None, help="League name to show if the feed has none")
    parser.add_argument("--output", default=None, help="Path to output summary JSON/text")
    parser.add_argument(
        "--output-format", choices=["json", "text"], default="json", help="Output format"
    )
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> None:
    load_dotenv()
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = faceit_config_from_env()
    if not config.api_key:
        raise SystemExit(
            "FACEIT_API_KEY not found. Set it in your shell or .env file before running."
        )
    championship_id = args.championship_id or config.championship_id
    adapter = FaceitLeagueAdapter(config)

    team_id = args.team_id
    team_name = None
    if not team_id:
        try:
            index = adapter.team_index(championship_id)
        except FETCH_ERRORS as e:
            raise SystemExit(f"Could not load teams for {championship_id}: {e}")
        team = resolve_team_by_name(index, args.team_name)
        if team is None:
            raise SystemExit(f"No team matching '{args.team_name}' in {championship_id}.")
        team_id, team_name = team.team_id, team.name

    result = asyncio.run(
        LeagueSummaryUseCase(adapter).execute(team_id, championship_id, title=args.title)
    )
    if result is None or not result.success or result.summary is None:
        raise SystemExit((result.error if result else None) or "Failed to load league matches.")

    if args.output_format == "json":
        output_text = json.dumps(transform_summary_to_frontend(result.summary), indent=2)
    else:
        output_text = render_text(result.summary, team_name)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output_text)
    else:
        print(output_text)


if __name__ == "__main__":
    main()
