"""Tool registry: name -> ToolDescriptor, built once at startup."""

import logging
from typing import Dict, Iterator, List

from mcp_server.errors import DuplicateToolError, ToolNotFoundError
from models.data_models import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Insertion-ordered registry of tools.

    Populated during startup, then frozen. Lookups after that are read-only.
    """

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor) -> ToolDescriptor:
        """Add a tool.

        Raises:
            DuplicateToolError: If a tool with the same name exists
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{descriptor.name}': registry is frozen")
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)

        self._tools[descriptor.name] = descriptor
        logger.debug(f"Registered tool: {descriptor.name}")
        return descriptor

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list(self) -> List[ToolDescriptor]:
        """All tools in registration order."""
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools)

    def resolve(self, name: str) -> ToolDescriptor:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._tools)
