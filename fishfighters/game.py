"""The game window, its main loop and keyboard controls."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

import pygame

from fishfighters.entity import BattleEntity
from fishfighters.fighters import Fighter
from fishfighters.loader import DataLoader, DataLoadError
from fishfighters.stage import FISH_BASE_TEXTURE, Stage

logger = logging.getLogger(__name__)

_WINDOW_SIZES = {
    pygame.K_KP1: (1920, 1080),
    pygame.K_KP2: (1280, 720),
    pygame.K_KP3: (640, 360),
}
_SPAWN_KEYS = {pygame.K_a: 1, pygame.K_e: 2}


class Game:
    """Owns the window, the game data and the stage, and runs the main loop."""

    FRAME_RATE = 60
    LOGICAL_RESOLUTION = (1280, 720)
    TITLE = "Fish Fighters"

    def __init__(self, data_dir: str | Path = ".") -> None:
        self._data_dir = Path(data_dir)
        self._textures: dict[str, Optional[pygame.Surface]] = {}
        self.delta_time = 0.0

        self.data_loader = DataLoader(self._data_dir)
        self.stage = Stage(texture_sizer=self._texture_size)

        pygame.display.init()
        self.window_size = self.LOGICAL_RESOLUTION
        self.window_position = (0, 0)
        self.center_window()
        self._window = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        pygame.display.set_caption(self.TITLE)
        self._canvas = pygame.Surface(self.LOGICAL_RESOLUTION)
        self._clock = pygame.time.Clock()
        self.is_open = True

        try:
            self.data_loader.load_all()
        except DataLoadError as exc:
            logger.error("%s", exc)
        self.stage.init(self.data_loader)

    def _texture(self, path: str) -> Optional[pygame.Surface]:
        if not path:
            return None
        if path not in self._textures:
            try:
                self._textures[path] = pygame.image.load(str(self._data_dir / path))
            except (pygame.error, OSError):
                logger.warning("could not load texture %s", path)
                self._textures[path] = None
        return self._textures[path]

    def _texture_size(self, path: str) -> tuple[int, int]:
        surface = self._texture(path)
        return surface.get_size() if surface is not None else (0, 0)

    def _entity_texture(self, entity: BattleEntity) -> str:
        if isinstance(entity, Fighter):
            return entity.data.texture
        if entity is self.stage.enemy_base:
            return self.stage.base_texture
        return FISH_BASE_TEXTURE

    def run_game_loop(self) -> None:
        """Load the first stage and run frames until the window is closed."""
        self.stage.load(1)
        try:
            while self.is_open:
                self.delta_time = self._clock.tick(self.FRAME_RATE) / 1000.0
                self.poll_events()
                self.stage.update(self.delta_time)
                self._render()
        finally:
            pygame.quit()

    def _render(self) -> None:
        self._canvas.fill((0, 0, 0))
        background = self._texture(self.stage.background_texture)
        if background is not None:
            self._canvas.blit(background, (0, 0))

        for entity in self.stage.draw_order():
            surface = self._texture(self._entity_texture(entity))
            if surface is None:
                continue
            rect = entity.texture_rect
            area = pygame.Rect(
                int(rect.position.x), int(rect.position.y), int(rect.size.x), int(rect.size.y)
            )
            dest = (
                entity.sprite_position.x - entity.sprite_origin.x,
                entity.sprite_position.y - entity.sprite_origin.y,
            )
            self._canvas.blit(surface, dest, area)

        window = pygame.display.get_surface()
        if window is None:
            return
        window.blit(pygame.transform.scale(self._canvas, window.get_size()), (0, 0))
        pygame.display.flip()

    def poll_events(self) -> None:
        """Handle window closing, resizing and the keyboard controls."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_open = False
            elif event.type == pygame.KEYDOWN:
                if event.key in _WINDOW_SIZES:
                    self.resize_window(_WINDOW_SIZES[event.key])
                elif event.key == pygame.K_ESCAPE:
                    self.is_open = False
                if event.key in _SPAWN_KEYS:
                    uid = _SPAWN_KEYS[event.key]
                    logger.info("spawn fish %d", uid)
                    self.stage.spawn_unit(self.data_loader.get_unit_data(uid))
            elif event.type == pygame.VIDEORESIZE:
                self.window_size = (event.w, event.h)
                self.center_window()

    def resize_window(self, new_size: Sequence[int]) -> None:
        """Resize the window; the logical resolution is scaled to fill it."""
        width, height = (int(v) for v in new_size)
        self.window_size = (width, height)
        self._window = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)

    def center_window(self) -> tuple[int, int]:
        """Compute and request the position that centres the window on the desktop."""
        sizes = pygame.display.get_desktop_sizes()
        desktop = sizes[0] if sizes else self.window_size
        x = (desktop[0] - self.window_size[0]) // 2
        y = (desktop[1] - self.window_size[1]) // 2
        self.window_position = (x, y)
        os.environ["SDL_VIDEO_WINDOW_POS"] = f"{x},{y}"
        return self.window_position


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the game."""
    parser = argparse.ArgumentParser(prog="fishfighters", description="Run Fish Fighters.")
    parser.add_argument(
        "--data-dir",
        default=".",
        help="directory holding game_data/ and assets/ (default: current directory)",
    )
    args = parser.parse_args(argv)
    Game(args.data_dir).run_game_loop()
    return 0