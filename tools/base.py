"""
tools/base.py: MusicalTool interface shared by the registry and /tools routes.

A tool declares its parameters once; __call__ checks the keyword arguments
against them before execute() ever sees them, and turns any exception raised
by execute() into a failed ToolResult.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ParamType = type | tuple[type, ...]


def _type_label(expected: ParamType) -> str:
    if isinstance(expected, tuple):
        return " | ".join(t.__name__ for t in expected)
    return expected.__name__


@dataclass(frozen=True)
class ToolParameter:
    """One keyword argument a tool accepts.

    ``type`` may be a tuple, e.g. ``(int, str)`` for a root given as a MIDI
    number or a pitch name. ``default`` is documentation only: omitted
    optional parameters reach execute() as missing keys.
    """

    name: str
    type: ParamType
    description: str
    required: bool = True
    default: Any = None

    def validate(self, value: Any) -> tuple[bool, str | None]:
        """Return (ok, error message) for a supplied value (None = omitted)."""
        if value is None:
            if self.required:
                return False, f"Required parameter '{self.name}' is missing"
            return True, None

        # bool subclasses int: True is not pitch 1
        if isinstance(value, bool) and self.type is not bool:
            return False, f"Parameter '{self.name}' must be {_type_label(self.type)}, got bool"

        if not isinstance(value, self.type):
            return (
                False,
                f"Parameter '{self.name}' must be {_type_label(self.type)}, "
                f"got {type(value).__name__}",
            )
        return True, None


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call. ``error`` is set exactly when ``success`` is False."""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


class MusicalTool(ABC):
    """Deterministic operation over pitches, scales and chords.

    Subclasses provide ``name``, ``description``, ``parameters`` and
    ``execute()``; callers invoke the instance itself.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, lowercase with underscores (e.g. "fit_pitches")."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Shown by GET /tools/list."""

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """Accepted keyword arguments, required ones first."""

    @abstractmethod
    def execute(self, **kwargs) -> ToolResult:
        """Run the tool on already-validated arguments."""

    def validate_inputs(self, **kwargs) -> tuple[bool, str | None]:
        """Check every declared parameter, then reject undeclared ones."""
        for param in self.parameters:
            is_valid, error = param.validate(kwargs.get(param.name))
            if not is_valid:
                return False, error

        known = {param.name for param in self.parameters}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            return False, f"Unknown parameter(s) {unknown}. Valid: {sorted(known)}"
        return True, None

    def __call__(self, **kwargs) -> ToolResult:
        is_valid, error = self.validate_inputs(**kwargs)
        if not is_valid:
            return ToolResult(success=False, error=error)

        try:
            return self.execute(**kwargs)
        except Exception as e:
            logger.warning("Tool '%s' failed: %s", self.name, e)
            return ToolResult(success=False, error=f"Tool execution failed: {e}")

    def to_dict(self) -> dict[str, Any]:
        """Listing form used by ToolRegistry.list_tools()."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                {
                    "name": p.name,
                    "type": _type_label(p.type),
                    "description": p.description,
                    "required": p.required,
                    "default": p.default,
                }
                for p in self.parameters
            ],
        }
