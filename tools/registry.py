"""
tools/registry.py: Name → MusicalTool lookup, filled by scanning tools/.

Dropping a module with a concrete MusicalTool subclass into tools/music/ is
enough to expose it through GET /tools/list and POST /tools/call.
"""

import importlib
import inspect
import logging
import pkgutil

from tools.base import MusicalTool

logger = logging.getLogger(__name__)


def _tool_classes(module) -> list[type[MusicalTool]]:
    """Concrete MusicalTool subclasses defined (not merely imported) in ``module``."""
    return [
        obj
        for _name, obj in inspect.getmembers(module, inspect.isclass)
        if obj.__module__ == module.__name__
        and issubclass(obj, MusicalTool)
        and not inspect.isabstract(obj)
    ]


class ToolRegistry:
    """Pitch tools keyed by ``MusicalTool.name``.

    >>> registry = ToolRegistry()
    >>> count = registry.discover()
    >>> registry.get("fit_pitches")(pitches=[61, 63]).data["fitted"]
    [60, 62]
    """

    def __init__(self):
        self._tools: dict[str, MusicalTool] = {}

    def register(self, tool: MusicalTool) -> None:
        """Add ``tool``; a second tool with the same name is a ValueError."""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> MusicalTool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[dict]:
        return [tool.to_dict() for tool in self._tools.values()]

    def discover(self, package_name: str = "tools") -> int:
        """Import every module below ``package_name`` and register its tools.

        Returns:
            How many tools this call registered. Modules that fail to
            import are logged and skipped.
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError:
            logger.warning("Tool discovery: package %r not importable", package_name)
            return 0
        if not hasattr(package, "__path__"):
            return 0

        count = 0
        for module_info in pkgutil.walk_packages(package.__path__, prefix=f"{package_name}."):
            try:
                module = importlib.import_module(module_info.name)
            except ImportError as exc:
                logger.warning("Tool discovery: skipping %s (%s)", module_info.name, exc)
                continue
            for tool_cls in _tool_classes(module):
                self.register(tool_cls())
                count += 1

        logger.debug("Tool discovery: %d tool(s) registered from %s", count, package_name)
        return count

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """Process-wide registry, discovered on first use."""
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
        _registry.discover()
    return _registry
