"""Grid parsing block.

Turns raw delimited text into a Grid of classified statuses.
"""

from typing import List

from .base import Block, BlockContext
from ..engine import parse_grid


class ParseGridBlock(Block):
    """Parses source text into a Grid.

    Inputs (from context):
        - source_text: Full contents of one delimited file
        - delimiter: Single field separator character

    Outputs (to context):
        - grid: Grid with one Empty / Pending / Finished status per field

    Example:
        context = BlockContext()
        context.set("source_text", "1;2;3\\nSum(Span([0,0],[0,2]))")
        context.set("delimiter", ";")

        ParseGridBlock().execute(context)
        grid = context.get("grid")   # 3x2 grid, one pending cell
    """

    def __init__(self, text_key: str = "source_text", delimiter_key: str = "delimiter"):
        """Initialize ParseGridBlock.

        Args:
            text_key: Context key for the source text
            delimiter_key: Context key for the delimiter
        """
        self.text_key = text_key
        self.delimiter_key = delimiter_key

    def inputs(self) -> List[str]:
        return [self.text_key, self.delimiter_key]

    def outputs(self) -> List[str]:
        return ["grid"]

    def execute(self, context: BlockContext) -> None:
        text: str = context.get(self.text_key)
        delimiter: str = context.get(self.delimiter_key)
        context.set("grid", parse_grid(text, delimiter))
