"""Basic strategy charts.

Each chart is written as a grid: rows are the player's total (or the value
of one card of a pair), columns the dealer's upcard. Cells hold a primary
move plus its fallback:

    H   hit                     S   stand
    Dh  double, else hit        Ds  double, else stand
    P   split
    Ph  split if DAS, else hit  Pd  split if DAS, else double
    Rh  surrender, else hit     Rs  surrender, else stand
    Rp  surrender, else split

A trailing ``*`` marks a statistically uncommon decision. Totals outside a
table reuse the nearest row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

UPCARDS = tuple(range(2, 12))  # 11 = Ace


class ChartCode(Enum):
    """Raw chart cell codes."""

    HIT = "H"
    STAND = "S"
    DOUBLE_OR_HIT = "Dh"
    DOUBLE_OR_STAND = "Ds"
    SPLIT = "P"
    SPLIT_DAS_OR_HIT = "Ph"
    SPLIT_DAS_OR_DOUBLE = "Pd"
    SURRENDER_OR_HIT = "Rh"
    SURRENDER_OR_STAND = "Rs"
    SURRENDER_OR_SPLIT = "Rp"


class ChartType(Enum):
    """Which table a hand is looked up in."""

    HARD = "hard"
    SOFT = "soft"
    SPLITS = "splits"


Table = Mapping[int, Mapping[int, ChartCode]]
UncommonCells = Mapping[ChartType, Mapping[int, tuple[int, ...]]]


def _label_value(label: str) -> int:
    if label == "A":
        return 11
    if label == "T":
        return 10
    return int(label)


def _parse_table(grid: str) -> tuple[Table, dict[int, tuple[int, ...]]]:
    """Parse a chart grid into a lookup table and its uncommon cells."""
    rows = [line.split() for line in grid.strip().splitlines()]
    upcards = [_label_value(label) for label in rows[0][1:]]
    table: dict[int, dict[int, ChartCode]] = {}
    uncommon: dict[int, tuple[int, ...]] = {}

    for row in rows[1:]:
        total = _label_value(row[0])
        cells = row[1:]
        if len(cells) != len(upcards):
            raise ValueError(f"Chart row {row[0]} has {len(cells)} cells")

        table[total] = {}
        for upcard, cell in zip(upcards, cells):
            if cell.endswith("*"):
                cell = cell[:-1]
                uncommon[total] = uncommon.get(total, ()) + (upcard,)
            table[total][upcard] = ChartCode(cell)

    return table, uncommon


@dataclass(frozen=True)
class StrategyChart:
    """The hard, soft and pair tables for one deck count and soft-17 rule."""

    name: str
    hard: Table
    soft: Table
    splits: Table
    uncommon: UncommonCells

    @classmethod
    def from_grids(cls, name: str, hard: str, soft: str, splits: str) -> "StrategyChart":
        tables = {}
        uncommon = {}
        for chart_type, grid in (
            (ChartType.HARD, hard),
            (ChartType.SOFT, soft),
            (ChartType.SPLITS, splits),
        ):
            tables[chart_type], cells = _parse_table(grid)
            if cells:
                uncommon[chart_type] = cells
        return cls(
            name=name,
            hard=tables[ChartType.HARD],
            soft=tables[ChartType.SOFT],
            splits=tables[ChartType.SPLITS],
            uncommon=uncommon,
        )

    def table(self, chart_type: ChartType) -> Table:
        """Return the table for a hand shape."""
        return {
            ChartType.HARD: self.hard,
            ChartType.SOFT: self.soft,
            ChartType.SPLITS: self.splits,
        }[chart_type]

    def lookup(self, chart_type: ChartType, player_total: int, dealer_upcard: int) -> ChartCode:
        """Look up a cell, clamping the total into the table's range."""
        table = self.table(chart_type)
        row = min(max(player_total, min(table)), max(table))
        return table[row][dealer_upcard]


SINGLE_DECK_H17 = StrategyChart.from_grids(
    "1 deck, dealer hits soft 17",
    hard="""
        .   2   3   4   5   6   7   8   9   T   A
        8   H   H   H   Dh* Dh* H   H   H   H   H
        9   Dh  Dh  Dh  Dh  Dh  H   H   H   H   H
        10  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        11  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh
        12  H*  S*  S   S   S   H   H   H   H   H
        13  S   S   S   S   S   H   H   H   H   H
        14  S   S   S   S   S   H   H   H   H   H
        15  S   S   S   S   S   H   H   H   Rh* Rh*
        16  S   S   S   S   S   H   H   H   Rh  Rh*
        17  S   S   S   S   S   S   S   S   S   S
        18  S   S   S   S   S   S   S   S   S   S
    """,
    soft="""
        .   2   3   4   5   6   7   8   9   T   A
        13  H   H   Dh  Dh  Dh  H   H   H   H   H
        14  H   H   Dh  Dh  Dh  H   H   H   H   H
        15  H   H   Dh  Dh  Dh  H   H   H   H   H
        16  H   H   Dh  Dh  Dh  H   H   H   H   H
        17  Dh* Dh  Dh  Dh  Dh  H   H   H   H   H
        18  S   Ds  Ds  Ds  Ds  S   S   H*  H   H
        19  S   S   S   S   Ds* S   S   S   S   S
        20  S   S   S   S   S   S   S   S   S   S
    """,
    splits="""
        .   2   3   4   5   6   7   8   9   T   A
        2   P   P   P   P   P   P   H   H   H   H
        3   Ph  P   P   P   P   P   Ph* H   H   H
        4   H   H   Ph  Pd  Pd  H   H   H   H   H
        5   Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        6   P   P   P   P   P   P   Ph* H   H   H
        7   P   P   P   P   P   P   P   H   Rs* H
        8   P   P   P   P   P   P   P   P   P   P
        9   P   P   P   P   P   S*  P   P   S   S
        T   S   S   S   S   S   S   S   S   S   S
        A   P   P   P   P   P   P   P   P   P   P
    """,
)

DOUBLE_DECK_H17 = StrategyChart.from_grids(
    "2 decks, dealer hits soft 17",
    hard="""
        .   2   3   4   5   6   7   8   9   T   A
        8   H   H   H   H   H   H   H   H   H   H
        9   Dh* Dh  Dh  Dh  Dh  H   H   H   H   H
        10  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        11  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh*
        12  H*  H*  S   S   S   H   H   H   H   H
        13  S   S   S   S   S   H   H   H   H   H
        14  S   S   S   S   S   H   H   H   H   H
        15  S   S   S   S   S   H   H   H   Rh  Rh*
        16  S   S   S   S   S   H   H   Rh* Rh  Rh
        17  S   S   S   S   S   S   S   S   S   Rs*
        18  S   S   S   S   S   S   S   S   S   S
    """,
    soft="""
        .   2   3   4   5   6   7   8   9   T   A
        13  H   H   Dh* Dh  Dh  H   H   H   H   H
        14  H   H   Dh* Dh  Dh  H   H   H   H   H
        15  H   H   Dh  Dh  Dh  H   H   H   H   H
        16  H   H   Dh  Dh  Dh  H   H   H   H   H
        17  H   Dh  Dh  Dh  Dh  H   H   H   H   H
        18  Ds* Ds  Ds  Ds  Ds  S   S   H   H   H
        19  S   S   S   S   Ds* S   S   S   S   S
        20  S   S   S   S   S   S   S   S   S   S
    """,
    splits="""
        .   2   3   4   5   6   7   8   9   T   A
        2   P   P   P   P   P   P   H   H   H   H
        3   P   P   P   P   P   P   H   H   H   H
        4   H   H   Ph* Ph  Ph  H   H   H   H   H
        5   Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        6   P   P   P   P   P   Ph* H   H   H   H
        7   P   P   P   P   P   P   Ph* H   H   H
        8   P   P   P   P   P   P   P   P   P   Rp*
        9   P   P   P   P   P   S*  P   P   S   S
        T   S   S   S   S   S   S   S   S   S   S
        A   P   P   P   P   P   P   P   P   P   P
    """,
)

DOUBLE_DECK_S17 = StrategyChart.from_grids(
    "2 decks, dealer stands on soft 17",
    hard="""
        .   2   3   4   5   6   7   8   9   T   A
        8   H   H   H   H   H   H   H   H   H   H
        9   Dh* Dh  Dh  Dh  Dh  H   H   H   H   H
        10  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        11  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh*
        12  H*  H*  S   S   S   H   H   H   H   H
        13  S   S   S   S   S   H   H   H   H   H
        14  S   S   S   S   S   H   H   H   H   H
        15  S   S   S   S   S   H   H   H   Rh  H
        16  S   S   S   S   S   H   H   H   Rh  Rh*
        17  S   S   S   S   S   S   S   S   S   S
        18  S   S   S   S   S   S   S   S   S   S
    """,
    soft="""
        .   2   3   4   5   6   7   8   9   T   A
        13  H   H   Dh* Dh  Dh  H   H   H   H   H
        14  H   H   Dh* Dh  Dh  H   H   H   H   H
        15  H   H   Dh  Dh  Dh  H   H   H   H   H
        16  H   H   Dh  Dh  Dh  H   H   H   H   H
        17  H   Dh  Dh  Dh  Dh  H   H   H   H   H
        18  S   Ds* Ds  Ds  Ds  S   S   H   H   H
        19  S   S   S   S   S   S   S   S   S   S
        20  S   S   S   S   S   S   S   S   S   S
    """,
    splits="""
        .   2   3   4   5   6   7   8   9   T   A
        2   P   P   P   P   P   P   H   H   H   H
        3   P   P   P   P   P   P   H   H   H   H
        4   H   H   Ph* Ph  Ph  H   H   H   H   H
        5   Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        6   P   P   P   P   P   Ph* H   H   H   H
        7   P   P   P   P   P   P   Ph* H   H   H
        8   P   P   P   P   P   P   P   P   P   P
        9   P   P   P   P   P   S*  P   P   S   S
        T   S   S   S   S   S   S   S   S   S   S
        A   P   P   P   P   P   P   P   P   P   P
    """,
)

MULTI_DECK_H17 = StrategyChart.from_grids(
    "4-8 decks, dealer hits soft 17",
    hard="""
        .   2   3   4   5   6   7   8   9   T   A
        8   H   H   H   H   H   H   H   H   H   H
        9   H*  Dh  Dh  Dh  Dh  H   H   H   H   H
        10  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        11  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh*
        12  H*  H*  S   S   S   H   H   H   H   H
        13  S   S   S   S   S   H   H   H   H   H
        14  S   S   S   S   S   H   H   H   H   H
        15  S   S   S   S   S   H   H   H   Rh  Rh*
        16  S   S   S   S   S   H   H   Rh* Rh  Rh
        17  S   S   S   S   S   S   S   S   S   Rs*
        18  S   S   S   S   S   S   S   S   S   S
    """,
    soft="""
        .   2   3   4   5   6   7   8   9   T   A
        13  H   H   H   Dh  Dh  H   H   H   H   H
        14  H   H   H   Dh  Dh  H   H   H   H   H
        15  H   H   Dh* Dh  Dh  H   H   H   H   H
        16  H   H   Dh* Dh  Dh  H   H   H   H   H
        17  H   Dh* Dh  Dh  Dh  H   H   H   H   H
        18  Ds* Ds  Ds  Ds  Ds  S   S   H   H   H
        19  S   S   S   S   Ds* S   S   S   S   S
        20  S   S   S   S   S   S   S   S   S   S
    """,
    splits="""
        .   2   3   4   5   6   7   8   9   T   A
        2   Ph  Ph  P   P   P   P   H   H   H   H
        3   Ph  Ph  P   P   P   P   H   H   H   H
        4   H   H   H   Ph* Ph* H   H   H   H   H
        5   Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        6   Ph* P   P   P   P   H   H   H   H   H
        7   P   P   P   P   P   P   H   H   H   H
        8   P   P   P   P   P   P   P   P   P   Rp*
        9   P   P   P   P   P   S*  P   P   S   S
        T   S   S   S   S   S   S   S   S   S   S
        A   P   P   P   P   P   P   P   P   P   P
    """,
)

MULTI_DECK_S17 = StrategyChart.from_grids(
    "4-8 decks, dealer stands on soft 17",
    hard="""
        .   2   3   4   5   6   7   8   9   T   A
        8   H   H   H   H   H   H   H   H   H   H
        9   H*  Dh  Dh  Dh  Dh  H   H   H   H   H
        10  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        11  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H*
        12  H*  H*  S   S   S   H   H   H   H   H
        13  S   S   S   S   S   H   H   H   H   H
        14  S   S   S   S   S   H   H   H   H   H
        15  S   S   S   S   S   H   H   H   Rh  H
        16  S   S   S   S   S   H   H   Rh* Rh  Rh
        17  S   S   S   S   S   S   S   S   S   S
        18  S   S   S   S   S   S   S   S   S   S
    """,
    soft="""
        .   2   3   4   5   6   7   8   9   T   A
        13  H   H   H   Dh  Dh  H   H   H   H   H
        14  H   H   H   Dh  Dh  H   H   H   H   H
        15  H   H   Dh* Dh  Dh  H   H   H   H   H
        16  H   H   Dh* Dh  Dh  H   H   H   H   H
        17  H   Dh* Dh  Dh  Dh  H   H   H   H   H
        18  S   Ds* Ds  Ds  Ds  S   S   H   H   H
        19  S   S   S   S   S   S   S   S   S   S
        20  S   S   S   S   S   S   S   S   S   S
    """,
    splits="""
        .   2   3   4   5   6   7   8   9   T   A
        2   Ph  Ph  P   P   P   P   H   H   H   H
        3   Ph  Ph  P   P   P   P   H   H   H   H
        4   H   H   H   Ph* Ph* H   H   H   H   H
        5   Dh  Dh  Dh  Dh  Dh  Dh  Dh  Dh  H   H
        6   Ph* P   P   P   P   H   H   H   H   H
        7   P   P   P   P   P   P   H   H   H   H
        8   P   P   P   P   P   P   P   P   P   P
        9   P   P   P   P   P   S*  P   P   S   S
        T   S   S   S   S   S   S   S   S   S   S
        A   P   P   P   P   P   P   P   P   P   P
    """,
)

# Keyed by (deck count, dealer hits soft 17).
CHARTS: Mapping[tuple[int, bool], StrategyChart] = {
    (1, True): SINGLE_DECK_H17,
    (2, True): DOUBLE_DECK_H17,
    (2, False): DOUBLE_DECK_S17,
    **{(decks, True): MULTI_DECK_H17 for decks in (4, 6, 8)},
    **{(decks, False): MULTI_DECK_S17 for decks in (4, 6, 8)},
}

DEFAULT_DECK_COUNT = 2


def chart_for(deck_count: int, hits_soft_17: bool = True) -> StrategyChart:
    """Return the chart for a table, falling back to the 2 deck chart."""
    return CHARTS.get(
        (deck_count, hits_soft_17),
        CHARTS[(DEFAULT_DECK_COUNT, hits_soft_17)],
    )


def uncommon_hands(deck_count: int, hits_soft_17: bool = True) -> UncommonCells:
    """Return the uncommon cells as {chart type: {total: (upcards, ...)}}."""
    return chart_for(deck_count, hits_soft_17).uncommon
