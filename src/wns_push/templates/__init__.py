"""Tile, toast and badge payload builders.

This package provides:
- The static template registry (name to image and text slot counts)
- TemplateParams descriptors built from positional values or a mapping
- XML rendering with escaping and toast options
- Badge values and rendering
"""

from wns_push.templates.badge import BADGE_STATES, BadgeValue, render_badge
from wns_push.templates.builder import (
    render_audio,
    render_template,
    render_toast_attributes,
    xml_escape,
)
from wns_push.templates.params import TemplateParams
from wns_push.templates.registry import TEMPLATES, TemplateSpec, get_template, iter_templates

__all__ = [
    # Registry
    "TEMPLATES",
    "TemplateSpec",
    "get_template",
    "iter_templates",
    # Parameters
    "TemplateParams",
    # Rendering
    "render_audio",
    "render_template",
    "render_toast_attributes",
    "xml_escape",
    # Badges
    "BADGE_STATES",
    "BadgeValue",
    "render_badge",
]
