"""
core/music_theory/scales.py: Scale templates and concrete scales.

A ScaleTemplate is a scale in the abstract (a name and a shape of semitone
offsets); calling create(root) turns it into a Scale, which is a
PitchContainer that PitchFitter can fit against.

YAML Scale Templates
--------------------
Located in core/music_theory/templates/scales.yaml. Loaded lazily on first
lookup and cached. The file declares every predefined template plus the
per-key note spelling tables used for scale names.

Exports:
    ScaleTemplate                 name + shape + relativity to major
    Scale                         a template bound to a root pitch class

    get_template(name) → ScaleTemplate
    available_templates() → tuple[str, ...]
    build_scale(root, template) → Scale
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.music_theory.fitting import fit_to_container
from core.music_theory.pitch import pitch_class, to_pitch
from core.music_theory.types import FitPitchOptions

logger = logging.getLogger(__name__)

_TEMPLATES_PATH: Path = Path(__file__).parent / "templates" / "scales.yaml"


# ---------------------------------------------------------------------------
# ScaleTemplate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScaleTemplate:
    """A scale type, before it is tied to any root.

    Attributes:
        name:               Display name, e.g. "Major", "Harmonic Minor"
        shape:              Semitone offsets above the root. The root (0)
                            is implied and must not be listed.
        relativity_to_major: Semitones from the relative major's root to this
                            scale's root (natural minor = -3, dorian = 2).

    Example:
        >>> james_minor = ScaleTemplate("James Minor", (2, 3, 5, 7, 8, 9), -3)
        >>> james_minor.create("E").pitches
        (4, 6, 7, 9, 11, 0, 1)
    """

    name: str
    shape: tuple[int, ...]
    relativity_to_major: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ScaleTemplate.name must not be empty")
        if len(self.shape) == 0:
            raise ValueError("Invalid scale template, shape cannot be empty")
        if any(offset <= 0 or offset >= 12 for offset in self.shape):
            raise ValueError(
                "Invalid scale template shape, must contain unique numbers only between 1 - 11"
            )
        shape = tuple(sorted(self.shape))
        if len(set(shape)) != len(shape):
            raise ValueError("Invalid scale template, no duplicate numbers allowed in the shape")
        object.__setattr__(self, "shape", shape)

    def create(self, root: int | str) -> Scale:
        """Return a Scale of this type rooted on ``root`` (pitch or pitch name)."""
        return Scale(self, to_pitch(root))


# ---------------------------------------------------------------------------
# YAML loading (lazy, cached)
# ---------------------------------------------------------------------------


def _template_key(name: str) -> str:
    return " ".join(name.replace("_", " ").lower().split())


@functools.cache
def _load_library() -> dict[str, Any]:
    """Load and cache the scale template library.

    Returns:
        Dict with ``templates`` (lookup key → ScaleTemplate), ``canonical``
        (ordered display names) and ``spellings`` (major root → 12 names).

    Raises:
        ValueError: If the template file is malformed
    """
    with _TEMPLATES_PATH.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    templates: dict[str, ScaleTemplate] = {}
    canonical: list[str] = []
    for entry in raw.get("templates", []):
        template = ScaleTemplate(
            name=entry["name"],
            shape=tuple(entry["shape"]),
            relativity_to_major=entry.get("relativity_to_major", 0),
        )
        canonical.append(template.name)
        for key in (template.name, *entry.get("aliases", ())):
            templates[_template_key(key)] = template

    spellings = {int(root): tuple(names) for root, names in raw.get("spellings", {}).items()}
    if sorted(spellings) != list(range(12)) or any(len(n) != 12 for n in spellings.values()):
        raise ValueError(f"{_TEMPLATES_PATH.name}: spellings must cover 12 roots x 12 names")

    logger.debug("Loaded %d scale templates from %s", len(canonical), _TEMPLATES_PATH.name)
    return {"templates": templates, "canonical": tuple(canonical), "spellings": spellings}


def get_template(name: str) -> ScaleTemplate:
    """Look up a predefined scale template by name or alias.

    Matching ignores case, and underscores count as spaces, so
    "natural_minor", "Natural Minor" and "aeolian" are all the same template.

    Raises:
        ValueError: If the name is not a known template
    """
    library = _load_library()
    template = library["templates"].get(_template_key(name))
    if template is None:
        raise ValueError(f"Unknown scale template {name!r}. Available: {list(library['canonical'])}")
    return template


def available_templates() -> tuple[str, ...]:
    """Return the display names of every predefined template, in file order."""
    return _load_library()["canonical"]


def build_scale(root: int | str, template: str = "major") -> Scale:
    """Build a scale from a root and a predefined template name.

    Examples:
        >>> build_scale("A", "natural minor").name
        'A Natural Minor'
    """
    return get_template(template).create(root)


# ---------------------------------------------------------------------------
# Scale
# ---------------------------------------------------------------------------


class Scale:
    """A scale template bound to a root.

    Attributes:
        template: The ScaleTemplate this scale was built from
        pitches:  Pitch classes ordered ascending from the root
        name:     Human-readable name, e.g. "E Major", "Eb Natural Minor"
    """

    def __init__(self, template: ScaleTemplate, root: int) -> None:
        root_pc = pitch_class(root)
        self._template = template
        self._pitches: tuple[int, ...] = (root_pc,) + tuple(
            (root_pc + offset) % 12 for offset in template.shape
        )
        spellings = _load_library()["spellings"]
        self._pitch_names: tuple[str, ...] = spellings[
            pitch_class(root_pc - template.relativity_to_major)
        ]
        self.name = f"{self.get_pitch_name(root_pc)} {template.name}"

    @property
    def template(self) -> ScaleTemplate:
        return self._template

    @property
    def pitches(self) -> tuple[int, ...]:
        return self._pitches

    @property
    def root(self) -> int:
        return self._pitches[0]

    @property
    def length(self) -> int:
        return len(self._pitches)

    def __len__(self) -> int:
        return len(self._pitches)

    def __repr__(self) -> str:
        return f"Scale({self.name!r}, pitches={self._pitches})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scale):
            return NotImplemented
        return self._template == other._template and self._pitches == other._pitches

    def __hash__(self) -> int:
        return hash((self._template, self._pitches))

    def contains(self, pitch: int | str) -> bool:
        """Return True if the pitch (in any octave) belongs to the scale."""
        return pitch_class(to_pitch(pitch)) in self._pitches

    def index_of(self, pitch: int | str) -> int:
        """Return the 0-based scale degree of ``pitch``, or -1 if not in the scale."""
        pc = pitch_class(to_pitch(pitch))
        try:
            return self._pitches.index(pc)
        except ValueError:
            return -1

    def get_pitch_name(self, pitch: int | str) -> str:
        """Return how ``pitch`` is spelled in the context of this scale's key."""
        return self._pitch_names[pitch_class(to_pitch(pitch))]

    def fit_pitch(
        self,
        pitch: float | str,
        options: FitPitchOptions | Mapping[str, Any] | None = None,
    ) -> int:
        """Return a pitch near ``pitch`` that belongs to the scale.

        Args:
            pitch:   Absolute pitch or pitch name. Fractional pitches are allowed.
            options: Fit options, a partial mapping of them, or None.

        Returns:
            The nearest scale pitch, honouring root preference and direction.
        """
        return fit_to_container(
            to_pitch(pitch),
            self.contains,
            self.root,
            FitPitchOptions.coerce(options),
        )
