#!/usr/bin/env python3
"""
Draw groups for a roster and print the group stage schedule.

Usage:
    python src/main.py data/roster.yaml
    python src/main.py data/roster.yaml --settings data/settings.yaml --bracket
    python src/main.py data/roster.yaml --yaml > state.yaml

The roster is a YAML list of competitors:

    - name: Miracle
      external_id: "105248644"
      rating: 6200
"""
import argparse
import logging
import os
import sys

import yaml

from arena.config import load_settings
from arena.double_elimination import SUPPORTED_BRACKET_SIZES, get_bracket_display
from arena.errors import ArenaError
from arena.models import FINISHED
from arena.standings import group_labels, group_table
from arena.tournament import TournamentState, generate_playoffs, register_competitor, start_tournament

logger = logging.getLogger(__name__)


def load_roster(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        entries = yaml.safe_load(file) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f'{file_path} must contain a list of competitors')
    logger.debug(f'Loaded {len(entries)} roster entries from {file_path}')
    return entries


def build_state(entries, settings):
    state = TournamentState()
    for entry in entries:
        state = register_competitor(
            state,
            name=entry.get('name'),
            external_id=entry.get('external_id'),
            rating=entry.get('rating'),
            registered_at=entry.get('registered_at'),
            settings=settings,
        )
    return start_tournament(state, settings)


def print_groups(state):
    names = {c.id: c.name for c in state.competitors}
    first_group = True
    for group in group_labels(state.competitors):
        if not first_group:
            print()
        print(f"# Group {group}")
        for competitor in group_table(state.competitors, group):
            print(f"  {competitor.name} ({competitor.rating}, {competitor.tier})")
        print("  Matches:")
        for match in state.group_matches:
            if match.group == group:
                print(f"    {names[match.slot1]} vs {names[match.slot2]}")
        first_group = False

    standby = [c for c in state.competitors if c.group is None]
    if standby:
        print()
        print("# Standby")
        for competitor in standby:
            print(f"  {competitor.name} ({competitor.rating})")


def print_bracket(state, settings):
    """Preview the playoff bracket as if the group stage ended with ratings deciding every tie."""
    preview = state.replace(group_matches=[m.replace(status=FINISHED) for m in state.group_matches])
    try:
        preview = generate_playoffs(preview, settings)
    except ArenaError as e:
        print(f"\nNo bracket preview: {e}")
        return

    display = get_bracket_display(preview.playoff_matches, preview.competitors)
    display.pop('champion', None)
    for section, rounds in display.items():
        print(f"\n## {section}")
        for label, matches in rounds.items():
            for match in matches:
                first, second = match['players']
                print(f"  {match['match_id']:<12} {label:<14} {first} vs {second}")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Draw tournament groups from a roster file.')
    parser.add_argument('roster', nargs='?', help='Roster YAML file (default: data/roster.yaml)')
    parser.add_argument('--settings', help='Settings YAML file')
    parser.add_argument('--bracket', action='store_true',
                        help=f'Also preview the playoff bracket ({", ".join(map(str, SUPPORTED_BRACKET_SIZES))} qualifiers)')
    parser.add_argument('--yaml', action='store_true', help='Print the tournament state as YAML instead')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    roster_file = args.roster or os.path.join(base_dir, 'data', 'roster.yaml')

    try:
        settings = load_settings(args.settings)
        state = build_state(load_roster(roster_file), settings)
    except (OSError, ValueError, ArenaError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.yaml:
        print(yaml.safe_dump(state.to_dict(), default_flow_style=False, sort_keys=False), end='')
        return 0

    print_groups(state)
    if args.bracket:
        print_bracket(state, settings)
    return 0


if __name__ == '__main__':
    sys.exit(main())
