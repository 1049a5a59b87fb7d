from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from enums.line_state import LineState, StaleReason
from models.base import Money
from models.cart import CartLine, LineKey


class PricedLine(BaseModel):
    """Price of one orderable cart line, rounded once at line level."""
    model_config = ConfigDict(frozen=True)

    key: LineKey
    item_id: str
    name: str
    size_name: str | None = None
    extra_names: tuple[str, ...] = ()
    unit_price: Money
    quantity: int
    line_total: Money
    discounted: bool = False  # Base price came from a running discount

    @property
    def state(self) -> LineState:
        return LineState.ACTIVE


class StaleLine(BaseModel):
    """A cart line that can no longer be ordered. Excluded from every total."""
    model_config = ConfigDict(frozen=True)

    key: LineKey
    item_id: str
    item_name: str
    quantity: int
    reason: StaleReason

    @property
    def state(self) -> LineState:
        return LineState.STALE


LineResult = PricedLine | StaleLine


class LineView(NamedTuple):
    """A cart line as shown to the customer: the line plus its reconciliation result."""
    line: CartLine
    result: LineResult

    @property
    def state(self) -> LineState:
        return self.result.state
