"""Klondike table state and move execution.

``GameSession`` owns every pile of one game, the result flag and a location
table mapping each card id to the pile and index currently holding it. The
interaction layer validates moves with the rule predicates before calling
the ``move_*`` methods; the executor itself only checks structural
preconditions (the card must be movable from where it sits).
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from klondike import common as C
from klondike import rules as R

logger = logging.getLogger(__name__)

FOUNDATION_COUNT = 4
TABLEAU_COUNT = 7
DECK_SIZE = 52


class PileKind(enum.Enum):
    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION = "foundation"
    TABLEAU = "tableau"


@dataclass(frozen=True)
class Source:
    """A pile on the table: its kind plus an index for foundations/tableau."""

    kind: PileKind
    index: int = 0


STOCK = Source(PileKind.STOCK)
WASTE = Source(PileKind.WASTE)


def foundation(index: int) -> Source:
    return Source(PileKind.FOUNDATION, index)


def tableau(index: int) -> Source:
    return Source(PileKind.TABLEAU, index)


class GameResult(enum.Enum):
    NONE = ""
    WIN = "win"


class MoveError(ValueError):
    """A move was requested whose preconditions do not hold."""


class GameSession:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        layout: Optional[Mapping[str, Sequence]] = None,
    ) -> None:
        self.rng = rng
        self.stock: List[C.Card] = []
        self.waste: List[C.Card] = []
        self.foundations: List[List[C.Card]] = [[] for _ in range(FOUNDATION_COUNT)]
        self.tableau: List[List[C.Card]] = [[] for _ in range(TABLEAU_COUNT)]
        self.result = GameResult.NONE
        self._where: Dict[int, Tuple[Source, int]] = {}
        if layout is not None:
            self.install(layout)
        else:
            self.start_new_game()

    # ----- Pile store -----
    def install(self, layout: Mapping[str, Sequence]) -> None:
        """Replace every pile with the given layout and rebuild the location table.

        Missing keys mean empty piles, so partial tables can be set up directly.
        """
        self.stock = list(layout.get("stock", ()))
        self.waste = list(layout.get("waste", ()))
        fnds = list(layout.get("foundations", ()))
        tabs = list(layout.get("tableau", ()))
        self.foundations = [list(fnds[i]) if i < len(fnds) else [] for i in range(FOUNDATION_COUNT)]
        self.tableau = [list(tabs[i]) if i < len(tabs) else [] for i in range(TABLEAU_COUNT)]
        self._where = {}
        for src in self.sources():
            self._reindex(src)

    def sources(self) -> Iterator[Source]:
        yield STOCK
        yield WASTE
        for i in range(FOUNDATION_COUNT):
            yield foundation(i)
        for i in range(TABLEAU_COUNT):
            yield tableau(i)

    def pile(self, src: Source) -> List[C.Card]:
        if src.kind is PileKind.STOCK:
            return self.stock
        if src.kind is PileKind.WASTE:
            return self.waste
        if src.kind is PileKind.FOUNDATION:
            return self.foundations[src.index]
        return self.tableau[src.index]

    def _reindex(self, src: Source) -> None:
        for i, c in enumerate(self.pile(src)):
            self._where[c.id] = (src, i)

    def location_of(self, card: C.Card) -> Tuple[Source, int]:
        try:
            return self._where[card.id]
        except KeyError:
            raise MoveError(f"{card!r} is not on the table") from None

    def source_of(self, card: C.Card) -> Source:
        return self.location_of(card)[0]

    def is_top(self, card: C.Card) -> bool:
        src, i = self.location_of(card)
        return i == len(self.pile(src)) - 1

    def face_up_suffix(self, card: C.Card) -> List[C.Card]:
        """Cards that travel with ``card``: the rest of its tableau pile, else just itself."""
        src, i = self.location_of(card)
        if src.kind is PileKind.TABLEAU:
            return list(self.tableau[src.index][i:])
        return [card]

    def card_count(self) -> int:
        return sum(len(self.pile(src)) for src in self.sources())

    def foundation_count(self) -> int:
        return sum(len(f) for f in self.foundations)

    def snapshot(self) -> dict:
        def cards(pile):
            return [(c.suit, c.rank, c.face_up) for c in pile]
        return {
            "stock": cards(self.stock),
            "waste": cards(self.waste),
            "foundations": [cards(f) for f in self.foundations],
            "tableau": [cards(p) for p in self.tableau],
            "result": self.result,
        }

    # ----- Rules -----
    def can_move_to_foundation(self, card: C.Card, index: int) -> bool:
        return R.can_move_to_foundation(card, self.foundations[index])

    def can_move_to_tableau(self, card: C.Card, index: int) -> bool:
        return R.can_move_to_tableau(card, self.tableau[index])

    # ----- Moves -----
    def _reveal_top(self, index: int) -> None:
        pile = self.tableau[index]
        if pile and not pile[-1].face_up:
            pile[-1].face_up = True
            logger.debug("Revealed %r on tableau %d", pile[-1], index)

    def _take_top(self, card: C.Card) -> Source:
        src, i = self.location_of(card)
        if src.kind is PileKind.STOCK:
            raise MoveError(f"{card!r} is still in the stock")
        pile = self.pile(src)
        if i != len(pile) - 1:
            raise MoveError(f"{card!r} is not on top of {src.kind.value} {src.index}")
        pile.pop()
        if src.kind is PileKind.TABLEAU:
            self._reveal_top(src.index)
        return src

    def move_to_foundation(self, card: C.Card, index: int) -> None:
        src = self._take_top(card)
        card.face_up = True
        self.foundations[index].append(card)
        self._reindex(foundation(index))
        logger.debug("Moved %r from %s %d to foundation %d", card, src.kind.value, src.index, index)
        self.check_win_condition()

    def move_to_tableau(self, card: C.Card, index: int) -> None:
        src, i = self.location_of(card)
        dest = tableau(index)
        if src == dest:
            return
        if src.kind is PileKind.TABLEAU:
            pile = self.tableau[src.index]
            moving = pile[i:]
            del pile[i:]
            self._reveal_top(src.index)
        else:
            self._take_top(card)
            moving = [card]
        self.tableau[index].extend(moving)
        self._reindex(dest)
        logger.debug("Moved %r (%d cards) from %s %d to tableau %d",
                     card, len(moving), src.kind.value, src.index, index)

    def check_win_condition(self) -> bool:
        if self.foundation_count() == DECK_SIZE:
            if self.result is not GameResult.WIN:
                logger.info("All foundations complete: game won")
            self.result = GameResult.WIN
        return self.result is GameResult.WIN

    def draw_from_stock(self) -> C.Card:
        if not self.stock:
            raise MoveError("stock is empty; recycle the waste instead")
        c = self.stock.pop()
        c.face_up = True
        self.waste.append(c)
        self._where[c.id] = (WASTE, len(self.waste) - 1)
        logger.debug("Drew %r (%d left in stock)", c, len(self.stock))
        return c

    def recycle_waste(self) -> None:
        """Turn the waste back over onto the stock, restoring the draw order."""
        moved = list(reversed(self.waste))
        self.waste.clear()
        for c in moved:
            c.face_up = False
        self.stock.extend(moved)
        self._reindex(STOCK)
        logger.debug("Recycled %d cards from waste to stock", len(moved))

    def start_new_game(self) -> None:
        self.result = GameResult.NONE
        self.install(C.deal(C.build_shuffled_deck(self.rng)))
        logger.info("New game dealt (%d cards in stock)", len(self.stock))
