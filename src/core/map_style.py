"""
Map Style Module.

Style sheet rules in the Google Maps JSON styling format. The editor
applies POI_SUPPRESSION_STYLE once the map surface is ready so that
points-of-interest do not clutter the boundary being drawn, while roads
stay visible for orientation.
"""

import json
from typing import Any, Dict, List

POI_SUPPRESSION_STYLE: List[Dict[str, Any]] = [
    {"featureType": "poi", "stylers": [{"visibility": "off"}]},
    {"featureType": "poi.business", "stylers": [{"visibility": "off"}]},
    {"featureType": "poi.park", "stylers": [{"visibility": "off"}]},
    {"featureType": "road", "stylers": [{"visibility": "on"}]},
]


def poi_suppression_style_json() -> str:
    """Returns the POI suppression style serialised as JSON."""
    return json.dumps(POI_SUPPRESSION_STYLE, indent=2)


def parse_map_style(style_json: str) -> Dict[str, bool]:
    """
    Parses a style sheet into per-feature visibility.

    Rules without a visibility styler are ignored. A later rule for the
    same feature type overrides an earlier one.

    Args:
        style_json: Style sheet text, a JSON list of rule objects.

    Returns:
        Dict[str, bool]: Feature type -> visible.

    Raises:
        ValueError: If the text is not a list of rule objects.
    """
    try:
        rules = json.loads(style_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"Map style is not valid JSON: {e}") from e

    if not isinstance(rules, list):
        raise ValueError("Map style must be a JSON list of rules")

    visibility: Dict[str, bool] = {}
    for rule in rules:
        if not isinstance(rule, dict):
            raise ValueError(f"Map style rule must be an object, got {rule!r}")
        feature = rule.get("featureType", "all")
        for styler in rule.get("stylers", []):
            value = styler.get("visibility") if isinstance(styler, dict) else None
            if value is None:
                continue
            if value not in ("on", "off", "simplified"):
                raise ValueError(f"Unknown visibility '{value}' for {feature}")
            visibility[feature] = value != "off"
    return visibility


def is_feature_visible(visibility: Dict[str, bool], feature_type: str) -> bool:
    """
    Resolves visibility for a feature type, falling back to its parents.

    "poi.park" inherits from "poi", which inherits from "all". Unstyled
    features are visible.

    Args:
        visibility: Mapping from parse_map_style().
        feature_type: Dotted feature type.

    Returns:
        bool: True if the feature should be drawn.
    """
    parts = feature_type.split(".")
    while parts:
        key = ".".join(parts)
        if key in visibility:
            return visibility[key]
        parts.pop()
    return visibility.get("all", True)
