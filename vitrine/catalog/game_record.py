"""
Game data structures for catalog records.

A GameRecord is loaded from one catalog JSON document, normalized once, and
then enriched by the build pipeline (resolved version, disks, artwork) before
being embedded in the published game document.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

# Catalog JSON key -> GameRecord attribute
FIELD_ALIASES: Dict[str, str] = {
    'name': 'name',
    'description': 'description',
    'system': 'system',
    'cloneOf': 'clone_of',
    'parentSystem': 'parent_system',
    'roms': 'roms',
    'genre': 'genre',
    'genres': 'genres',
    'nativeResolution': 'native_resolution',
    'biosFiles': 'bios_files',
    'controls': 'controls',
    'buttonLabels': 'button_labels',
    'players': 'players',
    'alternating': 'alternating',
    'mature': 'mature',
    'externalLocation': 'external_location',
    'version': 'version',
    'disks': 'disks',
    'nvramFiles': 'nvram_files',
    'artworkName': 'artwork_name',
    'artworkFiles': 'artwork_files',
    'externalEmulatorLocation': 'external_emulator_location',
    'wasmProgramName': 'wasm_program_name',
}

ATTRIBUTE_KEYS: Dict[str, str] = {v: k for k, v in FIELD_ALIASES.items()}

REQUIRED_KEYS = ('description', 'system')

_TRAILING_PARENTHETICAL = re.compile(r'\s*\(.*\)\s*$')


def parse_genres(genre: Optional[str]) -> List[str]:
    """
    Split a catalog genre string into an ordered genre list.

    Some exports contain stray '][' and '!' characters which are stripped.

    Example:
        >>> parse_genres('Shooter/Flying Vertical!')
        ['Shooter', 'Flying Vertical']
    """
    if not genre:
        return []

    genres = []
    for part in genre.split('/'):
        cleaned = part.replace('][', '').replace('!', '').strip()
        if cleaned:
            genres.append(cleaned)
    return genres


def normalize_description(description: str, system: str) -> str:
    """
    Reformat a catalog description for display.

    A trailing ", The" article moves to the front. MAME descriptions also lose
    a trailing parenthetical (revision, region and similar noise).

    Example:
        >>> normalize_description('Simpsons, The (4 Players World, set 1)', 'mame')
        'The Simpsons'
    """
    if ', The' in description:
        head, tail = description.split(', The', 1)
        description = f"The {head}{tail}"

    if system.lower() == 'mame':
        description = _TRAILING_PARENTHETICAL.sub('', description)

    return description


@dataclass
class GameRecord:
    """
    Represents one game from the catalog database.

    Catalog fields come first; the trailing block is attached by the build.
    """
    # Required fields
    name: str  # Machine id, stable key (e.g. "pacman")
    description: str
    system: str  # Emulator family (e.g. "mame", "dosbox")

    clone_of: Optional[str] = None
    parent_system: Optional[str] = None
    roms: List[str] = field(default_factory=list)
    genre: str = ''
    genres: List[str] = field(default_factory=list)
    native_resolution: Optional[List[int]] = None
    bios_files: Optional[List[str]] = None
    controls: Optional[Dict[str, Any]] = None
    button_labels: Optional[List[str]] = None
    players: Optional[int] = None
    alternating: Optional[bool] = None
    mature: Optional[bool] = None
    external_location: Optional[str] = None

    # Attached by the build
    version: Optional[str] = None
    disks: Optional[List[str]] = None
    nvram_files: Optional[List[str]] = None
    artwork_name: Optional[str] = None
    artwork_files: Optional[List[str]] = None
    external_emulator_location: Optional[str] = None
    wasm_program_name: Optional[str] = None

    # Catalog keys not modelled above
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_mame(self) -> bool:
        return self.system.lower() == 'mame'

    @property
    def is_clone(self) -> bool:
        return bool(self.clone_of)

    @property
    def label(self) -> str:
        """Human-readable identification used in logs."""
        return f'"{self.description}" ({self.name})'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameRecord':
        """
        Create a GameRecord from a catalog JSON document.

        Args:
            data: Parsed catalog document (camelCase keys)

        Returns:
            GameRecord instance (not yet normalized)

        Raises:
            ValueError: If the document is not an object or a required key
                is missing
        """
        if not isinstance(data, dict):
            raise ValueError("Catalog record is not a JSON object")

        data = dict(data)

        # Older exports key the machine id as "id"
        if 'name' not in data and 'id' in data:
            data['name'] = data.pop('id')

        missing = [key for key in ('name',) + REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise ValueError(f"Catalog record missing required field(s): {', '.join(missing)}")

        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            attribute = FIELD_ALIASES.get(key)
            if attribute:
                kwargs[attribute] = value
            else:
                extra[key] = value

        kwargs['roms'] = list(kwargs.get('roms') or [])
        kwargs['genre'] = kwargs.get('genre') or ''
        kwargs['extra_fields'] = extra

        return cls(**kwargs)

    def normalize(self) -> 'GameRecord':
        """Normalize description and genres in place."""
        self.description = normalize_description(self.description, self.system)
        if not self.genres:
            self.genres = parse_genres(self.genre)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize back to the camelCase catalog form.

        None values are omitted; extra fields are preserved.
        """
        result: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == 'extra_fields':
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            result[ATTRIBUTE_KEYS[f.name]] = value
        for key, value in self.extra_fields.items():
            result.setdefault(key, value)
        return result
