# layout.py - pile slot geometry shared by hit-testing and drawing
import pygame

from klondike import common as C
from klondike.game import PileKind, Source


def column_x(col: int) -> int:
    return C.MARGIN + col * (C.CARD_W + C.CARD_SPACING)

def tableau_top() -> int:
    return C.MARGIN + C.CARD_H + C.CARD_SPACING

def stock_rect() -> pygame.Rect:
    return pygame.Rect(column_x(0), C.MARGIN, C.CARD_W, C.CARD_H)

def waste_rect() -> pygame.Rect:
    return pygame.Rect(column_x(1), C.MARGIN, C.CARD_W, C.CARD_H)

def foundation_rect(index: int) -> pygame.Rect:
    # Foundations sit above tableau columns 3..6
    return pygame.Rect(column_x(index + 3), C.MARGIN, C.CARD_W, C.CARD_H)

def tableau_slot_rect(index: int) -> pygame.Rect:
    return pygame.Rect(column_x(index), tableau_top(), C.CARD_W, C.CARD_H)

def tableau_card_rect(index: int, position: int) -> pygame.Rect:
    return pygame.Rect(column_x(index), tableau_top() + position * C.FAN_Y, C.CARD_W, C.CARD_H)

def card_rect(src: Source, position: int) -> pygame.Rect:
    """Where the card at ``position`` of pile ``src`` is drawn."""
    if src.kind is PileKind.STOCK:
        return stock_rect()
    if src.kind is PileKind.WASTE:
        return waste_rect()
    if src.kind is PileKind.FOUNDATION:
        return foundation_rect(src.index)
    return tableau_card_rect(src.index, position)

def contains(rect: pygame.Rect, pos) -> bool:
    """Point-in-rect including the right and bottom edges."""
    x, y = pos
    return rect.left <= x <= rect.right and rect.top <= y <= rect.bottom

def in_tableau_column(index: int, pos) -> bool:
    """Drop test for a tableau pile: its column, anywhere below the row start."""
    x, y = pos
    left = column_x(index)
    return left <= x <= left + C.CARD_W and y >= tableau_top()
