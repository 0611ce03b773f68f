"""
Chrome Package - Shared page chrome helpers.
"""

from .breadcrumbs import (
    Crumb,
    add_crumb,
    current_crumb,
    linked_crumbs,
    parse_trail,
    serialize_trail,
)

__all__ = [
    "Crumb",
    "add_crumb",
    "current_crumb",
    "linked_crumbs",
    "parse_trail",
    "serialize_trail",
]
