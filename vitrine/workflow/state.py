"""Run-wide build state."""

from dataclasses import dataclass, field
from typing import Set

from ..mame.metadata_reconciler import BinaryVariationCache
from ..report import AggregateReport


@dataclass
class RunState:
    """
    State shared by every game of one build run.

    Attributes:
        report: Run report, each game's report is merged into it
        published_binaries: Emulator binary ids already published
        controller_published: The shared MAME controller file was published
        variations: Binary file-location variations discovered so far
    """
    report: AggregateReport = field(default_factory=AggregateReport)
    published_binaries: Set[str] = field(default_factory=set)
    controller_published: bool = False
    variations: BinaryVariationCache = field(default_factory=BinaryVariationCache)
