"""Adapters between the generation core and the outside world.

Loading rule files into a catalog and constraint table, and rendering
finished grids as images or text.
"""

from .loader import (
    LoadIssue,
    RuleSet,
    parse_rules,
    load_rules,
    parse_rules_yaml,
    load_rules_yaml,
    load_ruleset,
)
from .render import render_image, save_image, render_text

__all__ = [
    "LoadIssue",
    "RuleSet",
    "parse_rules",
    "load_rules",
    "parse_rules_yaml",
    "load_rules_yaml",
    "load_ruleset",
    "render_image",
    "save_image",
    "render_text",
]
