"""
Document rendering package for vitrine.

Loads HTML template fragments, localized strings, and composes game documents.
"""

from .templates import (
    TemplateRenderer,
    compute_app_id,
    find_placeholders,
    replace_component_placeholder,
    replace_placeholder,
    replace_resource_placeholder,
)
from .localization import LocalizationBundle, RTL_LANGUAGES
from .composer import DocumentComposer, DocumentSettings

__all__ = [
    "TemplateRenderer",
    "compute_app_id",
    "find_placeholders",
    "replace_component_placeholder",
    "replace_placeholder",
    "replace_resource_placeholder",
    "LocalizationBundle",
    "RTL_LANGUAGES",
    "DocumentComposer",
    "DocumentSettings",
]
