from enum import Enum


class RowKind(str, Enum):
    """What a row of the competitor table holds, decided by its cell count."""

    PARTNER_HEADER = "PARTNER_HEADER"  # 2 cells: blank, "With: Last, First"
    EVENT = "EVENT"  # 3 cells: blank, blank, "[ID] ... H:MM AM Event Name"
    NOISE = "NOISE"
