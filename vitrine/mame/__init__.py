"""
MAME support for vitrine.

ROM dump-set version selection, canonical metadata reconciliation and the
per-game virtual file system.
"""

from .machines import UNDISCOVERED_ASSEMBLIES, binary_id_for, wasm_filename, wasmjs_filename
from .version_resolver import (
    DumpSetVersion,
    MergeMode,
    VersionResolution,
    VersionResolver,
    load_versions,
)
from .manifest_builder import ManifestBuilder, VirtualFile, VirtualFileSystem, publish_roms
from .metadata_reconciler import (
    BinaryVariationCache,
    LocalFacts,
    MetadataReconciler,
    ReconciledMetadata,
)

__all__ = [
    "UNDISCOVERED_ASSEMBLIES",
    "binary_id_for",
    "wasm_filename",
    "wasmjs_filename",
    "DumpSetVersion",
    "MergeMode",
    "VersionResolution",
    "VersionResolver",
    "load_versions",
    "ManifestBuilder",
    "VirtualFile",
    "VirtualFileSystem",
    "publish_roms",
    "BinaryVariationCache",
    "LocalFacts",
    "MetadataReconciler",
    "ReconciledMetadata",
]
