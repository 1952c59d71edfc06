"""Pipeline plumbing for grid processing.

A pipeline is a set of blocks sharing one BlockContext. Each block names the
context keys it reads and the keys it writes; the executor derives the run
order from those names, so blocks can be listed in any order.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Set
from dataclasses import dataclass, field

from ..engine.graph import kahn_order
from ..exceptions import CircularDependencyError

logger = logging.getLogger(__name__)


# =============================================================================
# Block Context
# =============================================================================

@dataclass
class BlockContext:
    """Named values shared by the blocks of one pipeline run.

    Example:
        context = BlockContext()
        context.set("source_text", "1;2\\n[0,1]")
        context.set("delimiter", ";")

        ParseGridBlock().execute(context)
        grid = context.get("grid")
    """

    _data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def with_values(cls, **values: Any) -> "BlockContext":
        """Context pre-filled with keyword values."""
        return cls(_data=dict(values))

    def get(self, key: str) -> Any:
        """Value stored under key.

        Raises:
            KeyError: If nothing was stored under key; the message lists what is there
        """
        try:
            return self._data[key]
        except KeyError:
            raise KeyError(f"Key '{key}' not found in context. Available keys: {self.keys()}") from None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data)


# =============================================================================
# Block Base Class
# =============================================================================

class Block(ABC):
    """One step of a grid pipeline.

    Subclasses declare the context keys they consume and produce and do
    their work in execute(). A block must write every key it declares.

    Example:
        class UpperCaseBlock(Block):
            def inputs(self) -> List[str]:
                return ["source_text"]

            def outputs(self) -> List[str]:
                return ["upper_text"]

            def execute(self, context: BlockContext) -> None:
                context.set("upper_text", context.get("source_text").upper())
    """

    @abstractmethod
    def inputs(self) -> List[str]:
        """Context keys this block reads."""

    @abstractmethod
    def outputs(self) -> List[str]:
        """Context keys this block writes."""

    @abstractmethod
    def execute(self, context: BlockContext) -> None:
        """Read inputs from context and write outputs back to it."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(inputs={self.inputs()}, outputs={self.outputs()})"


# =============================================================================
# Ordering
# =============================================================================

def topological_sort(blocks: List[Block]) -> List[Block]:
    """Order blocks so that each one runs after the producers of its inputs.

    Inputs that no block produces are expected in the initial context. Ties
    keep the order of ``blocks``.

    Raises:
        ValueError: If two blocks write the same key
        CircularDependencyError: If producers and consumers form a loop

    Example:
        topological_sort([DisplayFrameBlock(), ParseGridBlock(), ResolveGridBlock()])
        → [ParseGridBlock, ResolveGridBlock, DisplayFrameBlock]
    """
    producers: Dict[str, Block] = {}
    for block in blocks:
        for key in block.outputs():
            if key in producers:
                raise ValueError(f"Multiple blocks produce '{key}': {producers[key]} and {block}")
            producers[key] = block

    dependencies: Dict[Block, Set[Block]] = {
        block: {producers[key] for key in block.inputs() if key in producers}
        for block in blocks
    }

    ordered, stuck = kahn_order(blocks, dependencies)
    if stuck:
        raise CircularDependencyError(f"Circular dependency detected among blocks: {stuck}")
    return ordered


# =============================================================================
# Block Executor
# =============================================================================

class BlockExecutor:
    """Runs a set of blocks against a context in dependency order.

    Before each block runs its inputs must be present, and afterwards its
    declared outputs must have been written; either failure stops the run.

    Example:
        executor = BlockExecutor([DisplayFrameBlock(), ParseGridBlock(), ResolveGridBlock()])
        context = BlockContext.with_values(
            source_text=text, delimiter=";", resolution_cfg=ResolutionCFG(),
        )
        executor.execute(context)
        display_df = context.get("display_frame")
    """

    def __init__(self, blocks: List[Block]):
        self.blocks = blocks
        self._order: Optional[List[Block]] = None

    @property
    def order(self) -> List[Block]:
        """Execution order (computed once)."""
        if self._order is None:
            self._order = topological_sort(self.blocks)
        return self._order

    def execute(self, context: BlockContext) -> BlockContext:
        """Run every block, in order, against context.

        Raises:
            CircularDependencyError: If the blocks cannot be ordered
            KeyError: If a block's input is missing when it is due to run
            ValueError: If a block did not write one of its outputs
        """
        for block in self.order:
            missing = [key for key in block.inputs() if not context.has(key)]
            if missing:
                raise KeyError(
                    f"Block {block} requires input '{missing[0]}' but it's not in context. "
                    f"Available keys: {context.keys()}"
                )

            logger.debug("Running %s", block.__class__.__name__)
            block.execute(context)

            for key in block.outputs():
                if not context.has(key):
                    raise ValueError(f"Block {block} declared output '{key}' but didn't write it to context")

        return context
