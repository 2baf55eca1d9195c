"""Short-circuit signal raised by ``bind`` inside a Do scope."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from monadkit.do import DoContext


class Halt(Exception):  # noqa: N818
    """A failure-like container leaving the Do scope that bound it.

    Each halt is tagged with the scope it belongs to. Only that scope turns it
    back into a return value; any other scope it crosses re-raises it.

    Attributes:
        context: The DoContext whose ``bind`` raised this halt.
        value: The Failure, Nothing or Error the scope returns.
    """

    def __init__(self, context: DoContext, value: Any) -> None:
        self.context = context
        self.value = value
        super().__init__(value)

    def __repr__(self) -> str:
        return f'Halt({self.value!r})'
