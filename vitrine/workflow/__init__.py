"""Build workflow package."""

from .state import RunState
from .pipeline import CatalogBuilder, EmulatorOutcome

__all__ = [
    "RunState",
    "CatalogBuilder",
    "EmulatorOutcome",
]
