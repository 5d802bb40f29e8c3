"""
Host-facing tools for geoedit.

Modules:
    editing: Event dispatch, handles, previews and collection checks
"""

from geoedit.tools.editing import (
    handle_interaction,
    get_edit_handles,
    get_edit_preview,
    check_feature_collection,
    list_modes,
)

__all__ = [
    "handle_interaction",
    "get_edit_handles",
    "get_edit_preview",
    "check_feature_collection",
    "list_modes",
]
