"""Pointer-driven interaction for a Klondike table.

``InteractionController`` turns press/release/motion events into moves on a
``GameSession``. It is either idle or dragging a stack of cards; the cards
stay in their piles while dragged and only move when a release lands on a
slot that accepts the lead card.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from klondike import common as C
from klondike import layout as L
from klondike.game import GameSession, Source

logger = logging.getLogger(__name__)


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class InteractionController:
    """Click, double-click and drag handling on top of one game session."""

    def __init__(
        self,
        session: GameSession,
        clock: Optional[Callable[[], int]] = None,
        double_click_ms: Optional[int] = None,
    ) -> None:
        self.session = session
        self.clock = clock or _monotonic_ms
        self.double_click_ms = C.DOUBLE_CLICK_MS if double_click_ms is None else int(double_click_ms)
        self.drag_stack: List[C.Card] = []
        self.drag_source: Optional[Source] = None
        self.drag_offset: Tuple[int, int] = (0, 0)
        self.pointer: Tuple[int, int] = (0, 0)
        self._last_click_time = 0
        self._last_click_card: Optional[int] = None

    @property
    def is_dragging(self) -> bool:
        return bool(self.drag_stack)

    def dragged_ids(self) -> set:
        return {c.id for c in self.drag_stack}

    def drag_position(self, i: int) -> Tuple[int, int]:
        """Screen position of the i-th dragged card, fanned below the lead."""
        px, py = self.pointer
        ox, oy = self.drag_offset
        return px - ox, py - oy + i * C.FAN_Y

    def _clear_drag(self) -> None:
        self.drag_stack = []
        self.drag_source = None
        self.drag_offset = (0, 0)

    def _hit_card(self, pos) -> Optional[C.Card]:
        s = self.session
        if s.waste and L.contains(L.waste_rect(), pos):
            return s.waste[-1]
        for fi, f in enumerate(s.foundations):
            if f and L.contains(L.foundation_rect(fi), pos):
                return f[-1]
        for ti, pile in enumerate(s.tableau):
            for j in reversed(range(len(pile))):
                c = pile[j]
                if c.face_up and L.contains(L.tableau_card_rect(ti, j), pos):
                    return c
        return None

    def _send_to_foundation(self, card: C.Card) -> bool:
        s = self.session
        if not s.is_top(card):
            return False
        for fi in range(len(s.foundations)):
            if s.can_move_to_foundation(card, fi):
                s.move_to_foundation(card, fi)
                return True
        return False

    # ----- Events -----
    def pointer_motion(self, x: int, y: int) -> None:
        self.pointer = (x, y)

    def pointer_press(self, x: int, y: int) -> None:
        s = self.session
        pos = (x, y)
        self.pointer = pos
        now = self.clock()
        card = self._hit_card(pos)

        if (
            card is not None
            and card.id == self._last_click_card
            and now - self._last_click_time < self.double_click_ms
        ):
            if self._send_to_foundation(card):
                logger.debug("Double-click sent %r to a foundation", card)
                self._last_click_card = None
                return

        self._last_click_time = now
        self._last_click_card = card.id if card is not None else None

        if card is None:
            if L.contains(L.stock_rect(), pos):
                if s.stock:
                    s.draw_from_stock()
                else:
                    s.recycle_waste()
            return

        src, index = s.location_of(card)
        r = L.card_rect(src, index)
        self.drag_offset = (x - r.x, y - r.y)
        self.drag_source = src
        self.drag_stack = s.face_up_suffix(card)

    def pointer_release(self, x: int, y: int) -> bool:
        """Drop the dragged stack; returns True when a move was made."""
        if not self.drag_stack:
            return False
        s = self.session
        pos = (x, y)
        self.pointer = pos
        lead = self.drag_stack[0]
        moved = False
        try:
            if len(self.drag_stack) == 1:
                for fi in range(len(s.foundations)):
                    if L.contains(L.foundation_rect(fi), pos) and s.can_move_to_foundation(lead, fi):
                        s.move_to_foundation(lead, fi)
                        moved = True
                        break
            if not moved:
                for ti in range(len(s.tableau)):
                    if L.in_tableau_column(ti, pos) and s.can_move_to_tableau(lead, ti):
                        s.move_to_tableau(lead, ti)
                        moved = True
                        break
            if not moved:
                logger.debug("Dropped %r at %s: no legal target", lead, pos)
        finally:
            self._clear_drag()
        return moved

    def request_new_game(self) -> None:
        self._clear_drag()
        self._last_click_card = None
        self._last_click_time = 0
        self.session.start_new_game()
