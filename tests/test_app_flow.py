import importlib
import types

import pytest


@pytest.fixture
def headless_pygame(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")

    pygame = importlib.import_module("pygame")

    class DummyFont:
        def __init__(self, size):
            self._size = max(1, int(size) if size else 1)

        def render(self, text, *_, **__):
            width = max(1, len(str(text)) * max(self._size // 2, 1))
            height = max(1, self._size)
            return pygame.Surface((width, height), pygame.SRCALPHA)

        def size(self, text):
            width = max(1, len(str(text)) * max(self._size // 2, 1))
            return width, max(1, self._size)

        def get_height(self):
            return max(1, self._size)

    def _make_font(size):
        return DummyFont(size or 24)

    monkeypatch.setattr(
        pygame.font,
        "SysFont",
        lambda *args, size=None, **kwargs: _make_font(size if size is not None else (args[1] if len(args) > 1 else None)),
        raising=False,
    )
    monkeypatch.setattr(pygame.font, "get_default_font", lambda: "dummy", raising=False)

    class DummyClock:
        def tick(self, _fps):
            return 16

    monkeypatch.setattr(pygame.time, "Clock", lambda: DummyClock())
    monkeypatch.setattr(pygame.display, "Info", lambda: types.SimpleNamespace(current_w=1600, current_h=900))
    monkeypatch.setattr(pygame.display, "set_mode", lambda size, flags=0: pygame.Surface(size))
    monkeypatch.setattr(pygame.display, "flip", lambda: None)
    monkeypatch.setattr(pygame.display, "set_caption", lambda _title: None)
    return pygame


def _run_main(monkeypatch, pygame, event_steps):
    entry = importlib.import_module("klondike.__main__")
    scene_module = importlib.import_module("klondike.scenes.game")
    common = importlib.import_module("klondike.common")

    # Keep the user's real settings file out of the test
    monkeypatch.setattr(common, "load_settings", lambda: common.get_current_settings())

    captured = {}
    orig_scene_cls = scene_module.KlondikeGameScene

    class LoggedGameScene(orig_scene_cls):
        def __init__(self, app, *args, **kwargs):
            super().__init__(app, *args, **kwargs)
            captured["scene"] = self

    monkeypatch.setattr(entry, "KlondikeGameScene", LoggedGameScene)

    index = {"value": 0}

    def scripted_events():
        step = index["value"]
        if step >= len(event_steps):
            return []
        index["value"] += 1
        return event_steps[step]()

    monkeypatch.setattr(pygame.event, "get", scripted_events)

    quit_calls = []
    real_quit = pygame.quit

    def tracked_quit():
        quit_calls.append(True)
        real_quit()

    monkeypatch.setattr(pygame, "quit", tracked_quit)

    entry.main()
    assert quit_calls, "pygame.quit() should be called"
    return captured["scene"]


def test_play_session_draws_and_quits(monkeypatch, headless_pygame):
    pygame = headless_pygame
    monkeypatch.setenv("KLONDIKE_SEED", "1234")
    layout = importlib.import_module("klondike.layout")
    stock_pos = layout.stock_rect().center

    def click(pos):
        return [
            pygame.event.Event(pygame.MOUSEMOTION, {"pos": pos, "rel": (0, 0), "buttons": (0, 0, 0)}),
            pygame.event.Event(pygame.MOUSEBUTTONDOWN, {"pos": pos, "button": 1}),
            pygame.event.Event(pygame.MOUSEBUTTONUP, {"pos": pos, "button": 1}),
        ]

    event_steps = [
        lambda: click(stock_pos),
        lambda: [pygame.event.Event(pygame.QUIT, {})],
        # First confirm prompt is cancelled, game continues
        lambda: [pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_ESCAPE, "mod": 0})],
        lambda: click(stock_pos),
        lambda: [pygame.event.Event(pygame.QUIT, {})],
        lambda: [pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_RETURN, "mod": 0})],
    ]

    scene = _run_main(monkeypatch, pygame, event_steps)
    session = scene.session
    assert len(session.waste) == 2
    assert len(session.stock) == 22
    assert not scene.controller.is_dragging


def test_new_game_key_redeals(monkeypatch, headless_pygame):
    pygame = headless_pygame
    monkeypatch.delenv("KLONDIKE_SEED", raising=False)
    layout = importlib.import_module("klondike.layout")
    stock_pos = layout.stock_rect().center

    event_steps = [
        lambda: [pygame.event.Event(pygame.MOUSEBUTTONDOWN, {"pos": stock_pos, "button": 1})],
        lambda: [pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_n, "mod": 0})],
        lambda: [pygame.event.Event(pygame.QUIT, {})],
        lambda: [pygame.event.Event(pygame.KEYDOWN, {"key": pygame.K_y, "mod": 0})],
    ]

    scene = _run_main(monkeypatch, pygame, event_steps)
    assert scene.session.waste == []
    assert len(scene.session.stock) == 24
    assert scene.session.card_count() == 52
