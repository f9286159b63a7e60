"""
Tournament settings.

Defaults cover a Dota 2 1v1 league: up to five groups named A-E, two
qualifiers per group, best-of-3 series and medal tiers in 770 MMR bands.
A YAML file can override any of them.
"""
import copy
import logging
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS = {
    'group_names': ['A', 'B', 'C', 'D', 'E'],
    'group_count_rules': {
        'five_groups_min': 25,   # population >= 25 -> 5 groups
        'four_groups_above': 18  # population > 18 -> 4 groups, else 3
    },
    'qualifiers_per_group': 2,
    'max_score': 3,
    'tier_thresholds': [
        ['Herald', 0],
        ['Guardian', 770],
        ['Crusader', 1540],
        ['Archon', 2310],
        ['Legend', 3080],
        ['Ancient', 3850],
        ['Divine', 4620],
        ['Immortal', 5620],
    ],
}


def get_default_settings() -> Dict:
    """Return a fresh copy of the default settings."""
    return copy.deepcopy(DEFAULT_SETTINGS)


def _merge(base: Dict, overrides: Dict) -> Dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(file_path: Optional[str] = None) -> Dict:
    """
    Load settings from a YAML file and overlay them on the defaults.

    Args:
        file_path: Path to a YAML mapping. None returns the defaults.

    Returns:
        Settings dict with every default key present.

    Raises:
        ValueError: If the file does not contain a mapping or has an
            inconsistent value (too few group names, bad thresholds).
    """
    settings = get_default_settings()
    if not file_path:
        return settings

    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.debug(f'Settings file {file_path} is empty, using defaults')
        return settings
    if not isinstance(data, dict):
        raise ValueError(f'Settings file {file_path} must contain a mapping, got {type(data).__name__}')

    settings = _merge(settings, data)
    validate_settings(settings)
    logger.info(f'Loaded settings from {file_path}')
    return settings


def validate_settings(settings: Dict) -> None:
    """Check the values the engine relies on."""
    group_names = settings.get('group_names') or []
    if len(group_names) < 5:
        raise ValueError(f'group_names needs at least 5 labels, got {len(group_names)}')
    if len(set(group_names)) != len(group_names):
        raise ValueError('group_names must be unique')

    if int(settings.get('qualifiers_per_group', 0)) < 1:
        raise ValueError('qualifiers_per_group must be at least 1')
    if int(settings.get('max_score', 0)) < 1:
        raise ValueError('max_score must be at least 1')

    thresholds = settings.get('tier_thresholds') or []
    if not thresholds:
        raise ValueError('tier_thresholds must not be empty')
    previous = None
    for entry in thresholds:
        if len(entry) != 2:
            raise ValueError(f'tier_thresholds entries must be [name, min_rating], got {entry!r}')
        if previous is not None and entry[1] <= previous:
            raise ValueError('tier_thresholds must be strictly ascending')
        previous = entry[1]
