import random
import sys

import pygame

from settings import FPS, TITLE, WHITE, YELLOW
from engine.config import CONFIG_FILE, GameConfig, load_config, save_config
from engine.controllers.input import create_default_input_manager, intent_from_event
from engine.controllers.turns import PlayerAction, TurnController
from engine.error_handler import LOG_DIR, get_logger
from engine.game import Session, new_game
from engine.utils.save_system import load_game, save_game
from systems.input import InputAction, Intent
from telemetry.logger import telemetry
from ui.menus import (
    MenuClosed,
    PygameTargetSelector,
    character_screen,
    inventory_menu,
    level_up_menu,
    menu,
    msgbox,
)
from ui.renderer import Renderer

log = get_logger("main")


def play_game(session: Session, renderer: Renderer, fov_radius: int, save_slot: int) -> None:
    """Run the map view until the player exits (the game is saved on the way out)."""
    controller = TurnController(session, targets=PygameTargetSelector(renderer, session))
    input_manager = create_default_input_manager()
    clock = pygame.time.Clock()

    def refresh_fov() -> None:
        player = session.player
        session.game.game_map.compute_fov(player.x, player.y, fov_radius)

    refresh_fov()
    controller.check_level_up()

    while True:
        renderer.draw(session)
        pygame.display.flip()
        clock.tick(FPS)

        if controller.pending_level_up:
            controller.choose_level_up(level_up_menu(renderer, session))
            continue

        for event in pygame.event.get():
            intent = intent_from_event(event, input_manager)
            if intent is None:
                continue

            if intent.action is InputAction.OPEN_INVENTORY:
                index = inventory_menu(renderer, session, "Press the key next to an item to use it, or ESC to cancel.\n")
                if index is None:
                    continue
                intent = Intent.use(index)
            elif intent.action is InputAction.OPEN_DROP_MENU:
                index = inventory_menu(renderer, session, "Press the key next to an item to drop it, or ESC to cancel.\n")
                if index is None:
                    continue
                intent = Intent.drop(index)
            elif intent.action is InputAction.SHOW_CHARACTER:
                character_screen(renderer, session)
                continue
            elif intent.action is InputAction.SAVE:
                if save_game(session, save_slot):
                    session.game.messages.add("Game saved.", WHITE)
                continue

            result = controller.play_turn(intent)
            if result is PlayerAction.EXIT:
                if session.player.alive:
                    save_game(session, save_slot)
                return
            refresh_fov()


def main_menu(renderer: Renderer, config: GameConfig) -> None:
    if config.telemetry_enabled:
        telemetry.init(LOG_DIR / "telemetry.jsonl")
    else:
        telemetry.enabled = False

    while True:
        choice = menu(
            renderer,
            None,
            f"{TITLE}\n\nBy the light of a single torch, you enter the Tombs of the Ancient Kings.\n",
            ["Play a new game", "Continue last game", "Quit"],
            60,
        )

        if choice == 0:
            rng = random.Random(config.seed)
            session = new_game(rng=rng, telemetry=telemetry)
            play_game(session, renderer, config.fov_radius, config.save_slot)
        elif choice == 1:
            loaded = load_game(config.save_slot)
            if loaded is None:
                msgbox(renderer, None, "No saved game to load.", 40)
                continue
            game, roster = loaded
            session = Session(game=game, roster=roster, rng=random.Random(config.seed), telemetry=telemetry)
            session.game.messages.add("Welcome back, stranger.", YELLOW)
            play_game(session, renderer, config.fov_radius, config.save_slot)
        elif choice == 2:
            return


def main() -> None:
    pygame.init()
    pygame.display.set_caption(TITLE)

    config = load_config()
    if not CONFIG_FILE.exists():
        # write the defaults out so they can be edited
        save_config()
    flags = pygame.FULLSCREEN if config.fullscreen else 0
    screen = pygame.display.set_mode(config.get_resolution(), flags)
    renderer = Renderer(screen)

    try:
        main_menu(renderer, config)
    except MenuClosed:
        log.info("Window closed from a prompt")

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
