# game.py - Klondike table scene: feeds pygame input to the controller and draws the table
import random

import pygame

from klondike import common as C
from klondike import layout as L
from klondike.game import GameResult, GameSession, WASTE, STOCK, foundation, tableau
from klondike.interaction import InteractionController


class KlondikeGameScene(C.Scene):
    def __init__(self, app, seed=None, clock=None):
        super().__init__(app)
        rng = random.Random(seed) if seed is not None else None
        self.session = GameSession(rng=rng)
        settings = C.get_current_settings()
        self.controller = InteractionController(
            self.session,
            clock=clock or pygame.time.get_ticks,
            double_click_ms=settings.get("double_click_ms", C.DOUBLE_CLICK_MS),
        )

    # ---------- Event handling ----------
    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self.controller.pointer_press(*e.pos)
        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self.controller.pointer_release(*e.pos)
        elif e.type == pygame.MOUSEMOTION:
            self.controller.pointer_motion(*e.pos)
        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.controller.request_new_game()
            elif e.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))

    # ---------- Drawing ----------
    def _blit_card(self, screen, card, rect):
        card.x, card.y = rect.x, rect.y
        screen.blit(C.get_card_surface(card), (rect.x, rect.y))

    def _draw_placeholders(self, screen):
        rects = [L.stock_rect(), L.waste_rect()]
        rects += [L.foundation_rect(i) for i in range(len(self.session.foundations))]
        rects += [L.tableau_slot_rect(i) for i in range(len(self.session.tableau))]
        for r in rects:
            pygame.draw.rect(screen, C.PLACEHOLDER, r, border_radius=C.CARD_RADIUS)
            pygame.draw.rect(screen, C.BLACK, r, width=1, border_radius=C.CARD_RADIUS)

    def draw(self, screen):
        s = self.session
        dragged = self.controller.dragged_ids()
        screen.fill(C.TABLE_BG)
        self._draw_placeholders(screen)

        # Only the top card of stock, waste and foundations is visible
        for src in [STOCK, WASTE] + [foundation(i) for i in range(len(s.foundations))]:
            pile = s.pile(src)
            if pile and pile[-1].id not in dragged:
                self._blit_card(screen, pile[-1], L.card_rect(src, len(pile) - 1))

        for ti, pile in enumerate(s.tableau):
            for j, c in enumerate(pile):
                if c.id not in dragged:
                    self._blit_card(screen, c, L.card_rect(tableau(ti), j))

        # Drag visuals
        for i, c in enumerate(self.controller.drag_stack):
            x, y = self.controller.drag_position(i)
            screen.blit(C.get_card_surface(c), (x, y))

        hint = C.FONT_UI.render("N: New game", True, C.WHITE)
        screen.blit(hint, (C.SCREEN_W - hint.get_width() - 15, C.SCREEN_H - hint.get_height() - 10))

        if s.result is GameResult.WIN:
            self._draw_result(screen)

    def _draw_result(self, screen):
        band = pygame.Surface((C.SCREEN_W, 100), pygame.SRCALPHA)
        band.fill((0, 0, 0, 200))
        screen.blit(band, (0, C.SCREEN_H // 2 - 50))
        msg = C.FONT_TITLE.render("Congratulations! You Win!", True, C.WHITE)
        screen.blit(msg, (C.SCREEN_W // 2 - msg.get_width() // 2, C.SCREEN_H // 2 - msg.get_height() // 2))
