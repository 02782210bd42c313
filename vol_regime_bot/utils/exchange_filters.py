"""Lot size helpers from exchange info."""

from __future__ import annotations
import math
from typing import Optional


def parse_symbol_filters(symbol_info: Optional[dict]) -> tuple[float, float]:
    """
    Extract min_qty and step_size from the LOT_SIZE filter.
    Returns (min_qty, lot_step). Uses defaults if symbol_info is None.
    """
    min_qty = 0.001
    lot_step = 0.001
    if not symbol_info:
        return min_qty, lot_step
    for f in symbol_info.get("filters", []):
        if f.get("filterType") == "LOT_SIZE":
            min_qty = float(f.get("minQty", min_qty))
            lot_step = float(f.get("stepSize", lot_step))
    return min_qty, lot_step


def round_quantity(qty: float, min_qty: float, step_size: float) -> float:
    """Round |qty| down to step size keeping the sign; 0 if below min_qty."""
    if qty == 0:
        return 0.0
    size = math.floor(abs(qty) / step_size + 1e-9) * step_size
    if size < min_qty:
        return 0.0
    return math.copysign(round(size, 8), qty)
