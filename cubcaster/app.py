"""The game window: texture loading, key handling and the main loop."""

from __future__ import annotations

import os
import sys
from array import array
from typing import Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from cubcaster.config import Scene, load_scene  # noqa: E402
from cubcaster.errors import CubError, report  # noqa: E402
from cubcaster.geometry import WIN_H, WIN_W  # noqa: E402
from cubcaster.player import Controller, Key, initial_view  # noqa: E402
from cubcaster.raycaster import Frame, Raycaster  # noqa: E402
from cubcaster.xpm import XpmError, XpmImage, load_xpm  # noqa: E402

TITLE = "Cub3D"
FPS = 60

_KEYMAP = {
    pygame.K_w: Key.UP,
    pygame.K_s: Key.DOWN,
    pygame.K_d: Key.RIGHT,
    pygame.K_a: Key.LEFT,
    pygame.K_LEFT: Key.ROT_RIGHT,
    pygame.K_RIGHT: Key.ROT_LEFT,
    pygame.K_UP: Key.VIEW_UP,
    pygame.K_DOWN: Key.VIEW_DOWN,
    pygame.K_ESCAPE: Key.ESC,
}


def load_textures(scene: Scene) -> list[XpmImage]:
    """Load the wall textures in the order east, north, west, south."""
    paths = scene.textures
    images = []
    for path in (paths.east, paths.north, paths.west, paths.south):
        try:
            images.append(load_xpm(path))
        except XpmError:
            raise CubError("Error\nin img") from None
    return images


def translate_key(pygame_key: int) -> Key | None:
    """Return the game key for a pygame key code, or None if it has none."""
    return _KEYMAP.get(pygame_key)


def _present(screen: pygame.Surface, frame: Frame) -> None:
    data = array("I", (pixel | 0xFF000000 for pixel in frame.pixels))
    if sys.byteorder == "big":
        data.byteswap()
    surface = pygame.image.frombuffer(data.tobytes(), (frame.width, frame.height), "BGRA")
    screen.blit(surface, (0, 0))
    pygame.display.flip()


def run(scene: Scene) -> int:
    """Open the window and play the scene until it is closed."""
    textures = load_textures(scene)
    caster = Raycaster(scene.map.grid, textures, scene.floor, scene.ceiling)
    view = initial_view(scene.map.grid, scene.map.player)
    controller = Controller(caster, view)
    frame = Frame(WIN_W, WIN_H)
    pygame.init()
    try:
        screen = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption(TITLE)
        clock = pygame.time.Clock()
        caster.render(view, frame)
        _present(screen, frame)
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    key = translate_key(event.key)
                    if key is None:
                        continue
                    if event.type == pygame.KEYDOWN:
                        controller.keys.press(key)
                    else:
                        controller.keys.release(key)
            if controller.keys.quit_requested:
                running = False
            if running and controller.step():
                caster.render(view, frame)
                _present(screen, frame)
            clock.tick(FPS)
    finally:
        pygame.quit()
    print("Window closed!")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game on the scene file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        if len(args) != 1:
            raise CubError("Invalid argument.")
        scene = load_scene(args[0])
        return run(scene)
    except (CubError, MemoryError) as error:
        return report(error)


if __name__ == "__main__":
    sys.exit(main())