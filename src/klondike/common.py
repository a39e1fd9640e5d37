
# common.py - shared configuration, cards and deck building for Klondike
import os
import json
import random
import logging
import pygame
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# --- Settings ---
_DEFAULT_SETTINGS = {
    "double_click_ms": 300,
    "log_level": "INFO",
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_solitaire
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeSolitaire")
    return os.path.join(os.path.expanduser("~"), ".klondike_solitaire")

def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")

def get_current_settings():
    return dict(_CURRENT_SETTINGS)

def load_settings():
    try:
        with open(_settings_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return get_current_settings()
    if isinstance(data, dict):
        try:
            _CURRENT_SETTINGS.update({
                "double_click_ms": int(data.get("double_click_ms", _CURRENT_SETTINGS["double_click_ms"])),
                "log_level": str(data.get("log_level", _CURRENT_SETTINGS["log_level"])).upper(),
            })
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed settings in %s", _settings_path())
    return get_current_settings()

def save_settings(new_values: dict):
    # Merge and write to disk
    _CURRENT_SETTINGS.update({
        k: new_values[k] for k in _DEFAULT_SETTINGS if k in new_values
    })
    try:
        os.makedirs(_settings_dir(), exist_ok=True)
        with open(_settings_path(), "w", encoding="utf-8") as f:
            json.dump(_CURRENT_SETTINGS, f, indent=2)
    except OSError:
        logger.warning("Could not write settings to %s", _settings_path())

def env_seed() -> Optional[int]:
    """Deal seed from KLONDIKE_SEED, or None when unset or not an integer."""
    raw = os.environ.get("KLONDIKE_SEED", "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("KLONDIKE_SEED=%r is not an integer; dealing randomly", raw)
        return None

def env_log_level() -> str:
    return os.environ.get("KLONDIKE_LOG_LEVEL", "").strip().upper() or _CURRENT_SETTINGS["log_level"]


# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 800, 600
GREEN_TABLE = (0, 128, 0)
TABLE_BG = GREEN_TABLE
PLACEHOLDER = (16, 74, 28)
CARD_BACK = (85, 107, 47)

CARD_W, CARD_H = 71, 96
CARD_RADIUS = 8
CARD_SPACING = 15
MARGIN = 15
FAN_Y = 20

DOUBLE_CLICK_MS = 300

# Fonts are initialized via setup_fonts() AFTER pygame.init() in __main__.py
FONT_NAME = None
FONT_CORNER = None
FONT_UI = None
FONT_TITLE = None

def setup_fonts():
    global FONT_NAME, FONT_CORNER, FONT_UI, FONT_TITLE
    FONT_NAME = pygame.font.get_default_font()
    FONT_CORNER = pygame.font.SysFont(FONT_NAME, 16)
    FONT_UI = pygame.font.SysFont(FONT_NAME, 26, bold=True)
    FONT_TITLE = pygame.font.SysFont(FONT_NAME, 32, bold=True)

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (200, 20, 20)
CARD_FACE = (255, 255, 255)

SUITS = ["♠", "♥", "♦", "♣"]  # 0..3
SUIT_NAMES = ["spade", "heart", "diamond", "club"]
RANKS = list(range(1, 14))    # A..K
ACE, KING = 1, 13
RANK_TO_TEXT = {1:"A", 11:"J", 12:"Q", 13:"K"}
for _r in range(2,11):
    RANK_TO_TEXT[_r] = str(_r)

def is_red(suit):
    return suit in (1,2)  # hearts, diamonds

def successor(rank: int) -> Optional[int]:
    """Next rank up, or None for a King."""
    i = RANKS.index(rank) + 1
    return RANKS[i] if i < len(RANKS) else None

def predecessor(rank: int) -> Optional[int]:
    """Next rank down, or None for an Ace."""
    i = RANKS.index(rank) - 1
    return RANKS[i] if i >= 0 else None


# ---------- Cards ----------
class Card:
    __slots__ = ("suit", "rank", "face_up", "x", "y")
    def __init__(self, suit, rank, face_up=False):
        self.suit = suit   # 0..3
        self.rank = rank   # 1..13
        self.face_up = face_up
        # Last drawn position; owned by the renderer
        self.x = 0
        self.y = 0
    @property
    def id(self) -> int:
        return self.suit * len(RANKS) + (self.rank - 1)
    def color(self):
        return "red" if is_red(self.suit) else "black"
    def __repr__(self):
        return f"{RANK_TO_TEXT[self.rank]}{SUITS[self.suit]}{'↑' if self.face_up else '↓'}"


def build_shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Return the 52 cards face-down in Fisher-Yates shuffled order."""
    rng = rng or random
    deck = [Card(suit, rank, False) for suit in range(len(SUITS)) for rank in RANKS]
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def deal(deck: List[Card]) -> Dict[str, list]:
    """Deal the canonical Klondike layout, consuming ``deck`` from its end.

    Tableau pile i receives i+1 cards with only the last one face-up; the
    remaining cards become the face-down stock.
    """
    tableau: List[List[Card]] = [[] for _ in range(7)]
    for col in range(7):
        for r in range(col+1):
            c = deck.pop()
            c.face_up = (r == col)
            tableau[col].append(c)
    stock = list(deck)
    deck.clear()
    for c in stock:
        c.face_up = False
    return {
        "stock": stock,
        "waste": [],
        "foundations": [[] for _ in range(4)],
        "tableau": tableau,
    }


# ---------- Card surfaces ----------
_card_face_cache = {}
_card_back_cache = None

def draw_suit_shape(surface, center, suit_index, color, size=24):
    x, y = center
    if suit_index == 2:  # ♦ diamond
        half = size//2
        points = [(x, y - half), (x + half, y), (x, y + half), (x - half, y)]
        pygame.draw.polygon(surface, color, points)
    elif suit_index == 1:  # ♥ heart
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y - r), r)
        pygame.draw.circle(surface, color, (x + r, y - r), r)
        tri = [(x - 2*r, y - r), (x + 2*r, y - r), (x, y + 2*r)]
        pygame.draw.polygon(surface, color, tri)
    elif suit_index == 0:  # ♠ spade
        r = size//3
        pygame.draw.circle(surface, color, (x - r, y), r)
        pygame.draw.circle(surface, color, (x + r, y), r)
        tri = [(x - 2*r, y), (x + 2*r, y), (x, y - 2*r)]
        pygame.draw.polygon(surface, color, tri)
        stem_w = max(3, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))
    else:  # ♣ club
        r = size//3
        pygame.draw.circle(surface, color, (x, y - r), r)
        pygame.draw.circle(surface, color, (x - r, y + r//3), r)
        pygame.draw.circle(surface, color, (x + r, y + r//3), r)
        stem_w = max(3, size//6)
        pygame.draw.rect(surface, color, (x - stem_w//2, y + r, stem_w, size//2))

def get_card_surface(card):
    if not card.face_up:
        return get_back_surface()
    key = (card.suit, card.rank)
    if key in _card_face_cache:
        return _card_face_cache[key]
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, CARD_FACE, (0,0,CARD_W,CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0,0,CARD_W,CARD_H), width=1, border_radius=CARD_RADIUS)
    color = RED if is_red(card.suit) else BLACK
    label = FONT_CORNER.render(RANK_TO_TEXT[card.rank], True, color)
    surf.blit(label, (5, 5))
    draw_suit_shape(surf, (5 + label.get_width() + 8, 5 + label.get_height()//2), card.suit, color, size=10)
    r180 = pygame.transform.rotate(label, 180)
    surf.blit(r180, (CARD_W - 5 - r180.get_width(), CARD_H - 5 - r180.get_height()))
    draw_suit_shape(surf, (CARD_W//2, CARD_H//2), card.suit, color, size=24)
    _card_face_cache[key] = surf
    return surf

def get_back_surface():
    global _card_back_cache
    if _card_back_cache is not None:
        return _card_back_cache
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, CARD_BACK, (0,0,CARD_W,CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0,0,CARD_W,CARD_H), width=1, border_radius=CARD_RADIUS)
    # Retro grid pattern
    for i in range(10, CARD_W, 10):
        pygame.draw.line(surf, (255, 255, 255, 100), (i, 10), (i, CARD_H - 10), 1)
    for i in range(10, CARD_H, 10):
        pygame.draw.line(surf, (255, 255, 255, 100), (10, i), (CARD_W - 10, i), 1)
    _card_back_cache = surf
    return surf


# ---------- Base Scene ----------
class Scene:
    def __init__(self, app):
        self.app = app
        self.next_scene = None
    def handle_event(self, e): pass
    def update(self, dt): pass
    def draw(self, screen): pass
