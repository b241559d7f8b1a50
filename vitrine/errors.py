"""Fatal build errors.

Every exception here aborts the whole run. Per-game skips and per-asset
degradations are not exceptions; they are recorded in the aggregate report.
"""


class BuildError(Exception):
    """Base exception for build errors."""
    pass


class FatalBuildError(BuildError):
    """Fatal build error requiring immediate stop."""
    pass


class OutputClearError(FatalBuildError):
    """Previously published documents could not be deleted."""
    pass


class CorruptMetadataError(FatalBuildError):
    """Canonical metadata already contains output-only fields."""

    def __init__(self, machine: str, field_name: str):
        self.machine = machine
        self.field_name = field_name
        super().__init__(
            f"Existing {field_name} in canonical meta data for {machine} "
            f"(corrupt source or already processed)"
        )


class UnresolvedPlaceholderError(FatalBuildError):
    """A template placeholder survived substitution."""

    def __init__(self, document: str, placeholders: list):
        self.document = document
        self.placeholders = placeholders
        super().__init__(
            f"Bad template for {document}: unresolved placeholder(s) {', '.join(placeholders)}"
        )


class MissingEmulatorMetadataError(FatalBuildError):
    """Required emulator meta data for a non-MAME system is missing."""
    pass


class MissingRuntimeScriptError(FatalBuildError):
    """A required emulator runtime script is missing from the source tree."""
    pass


class MissingTemplateError(FatalBuildError):
    """A required HTML template piece is missing."""
    pass
