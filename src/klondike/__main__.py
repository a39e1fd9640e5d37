# __main__.py - entry point
import os
import logging
import pygame
from klondike import common as C
from klondike.logger import setup_logging
from klondike.scenes.game import KlondikeGameScene

logger = logging.getLogger(__name__)

def _initial_window_size():
    return C.SCREEN_W, C.SCREEN_H

def main():
    C.load_settings()
    setup_logging(C.env_log_level())

    # Center window and init
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()

    w, h = _initial_window_size()
    C.SCREEN_W, C.SCREEN_H = w, h
    screen = pygame.display.set_mode((w, h))
    pygame.display.set_caption("Klondike Solitaire")
    C.setup_fonts()
    clock = pygame.time.Clock()

    seed = C.env_seed()
    if seed is not None:
        logger.info("Dealing with seed %d", seed)
    scene = KlondikeGameScene(app=None, seed=seed)

    # Build a filter set of system/media keys to ignore
    def _system_keys_set():
        names = [
            # Brightness / keyboard illumination
            "K_BRIGHTNESSUP", "K_BRIGHTNESSDOWN", "K_KBDILLUMUP", "K_KBDILLUMDOWN", "K_KBDILLUMTOGGLE",
            # Volume / media
            "K_VOLUMEUP", "K_VOLUMEDOWN", "K_MUTE", "K_AUDIOMUTE",
            "K_AUDIOPLAY", "K_AUDIOSTOP", "K_AUDIONEXT", "K_AUDIOPREV",
            "K_MEDIASELECT",
        ]
        out = set()
        for n in names:
            v = getattr(pygame, n, None)
            if isinstance(v, int):
                out.add(v)
        for i in range(1, 13):
            v = getattr(pygame, f"K_F{i}", None)
            if isinstance(v, int):
                out.add(v)
        return out

    _SYSTEM_KEYS = _system_keys_set()
    # Keys the table scene reacts to
    _ALLOWED_KEYS = {pygame.K_ESCAPE, pygame.K_n}

    running = True
    confirm_quit = False

    def _confirm_modal_rects():
        mw, mh = 420, 170
        modal = pygame.Rect(0, 0, mw, mh)
        modal.center = (C.SCREEN_W // 2, C.SCREEN_H // 2)
        bw, bh = 110, 40
        gap = 30
        yes = pygame.Rect(0, 0, bw, bh)
        no  = pygame.Rect(0, 0, bw, bh)
        yes.centerx = modal.centerx - (bw // 2 + gap)
        no.centerx  = modal.centerx + (bw // 2 + gap)
        yes.bottom = modal.bottom - 20
        no.bottom  = modal.bottom - 20
        return modal, yes, no

    while running:
        clock.tick(60)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                confirm_quit = True
                continue
            if confirm_quit:
                # Handle confirm dialog input only
                if e.type == pygame.KEYDOWN:
                    if e.key in (pygame.K_ESCAPE, pygame.K_n):
                        confirm_quit = False
                    elif e.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_y):
                        running = False
                elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    modal, yes_r, no_r = _confirm_modal_rects()
                    if yes_r.collidepoint(e.pos):
                        running = False
                    elif no_r.collidepoint(e.pos):
                        confirm_quit = False
                continue
            if e.type == pygame.KEYDOWN:
                # Filter out system/media keys to avoid accidental actions
                if e.key in _SYSTEM_KEYS or e.key not in _ALLOWED_KEYS:
                    continue
            scene.handle_event(e)
        scene.draw(screen)
        # Overlay quit confirmation if active
        if confirm_quit:
            overlay = pygame.Surface((C.SCREEN_W, C.SCREEN_H), pygame.SRCALPHA)
            overlay.fill((0, 0, 0, 160))
            screen.blit(overlay, (0, 0))
            modal, yes_r, no_r = _confirm_modal_rects()
            pygame.draw.rect(screen, (240, 240, 240), modal, border_radius=16)
            pygame.draw.rect(screen, (80, 80, 80), modal, width=2, border_radius=16)
            title = C.FONT_TITLE.render("Quit Game?", True, (20, 20, 20))
            screen.blit(title, (modal.centerx - title.get_width() // 2, modal.y + 20))
            def draw_btn(rect, label):
                pygame.draw.rect(screen, (230, 230, 235), rect, border_radius=10)
                pygame.draw.rect(screen, (100, 100, 110), rect, 1, border_radius=10)
                t = C.FONT_UI.render(label, True, (20, 20, 25))
                screen.blit(t, (rect.centerx - t.get_width() // 2, rect.centery - t.get_height() // 2))
            draw_btn(yes_r, "Yes")
            draw_btn(no_r, "No")
        pygame.display.flip()
    pygame.quit()

if __name__ == "__main__":
    main()
