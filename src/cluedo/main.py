#!/usr/bin/env python
"""
Cluedo text client.
Main entry point for playing a game of Cluedo at the console.

Usage: python -m cluedo.main [board.txt]
"""

import os
import sys
import random
import logging
from typing import Callable, List, Optional, Tuple

from dotenv import load_dotenv

from cluedo.board_map import Room, load_board_text
from cluedo.cards import Card, Claim, RoomCard, SuspectCard, WeaponCard
from cluedo.engine import AccusationResult, BoardEngine
from cluedo.errors import ConfigurationError, GameError
from cluedo.game_setup import MAX_PLAYERS, MIN_PLAYERS, GameSetup, roll_die
from cluedo.tokens import Player, WEAPON_GLYPHS


# Load environment variables
load_dotenv()

# Configure logging for debugging games
logging.basicConfig(
    level=logging.DEBUG if os.environ.get("CLUE_DEBUG", "").lower() in ("1", "true", "yes") else logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


MOVE_NORTH = "Move North."
MOVE_SOUTH = "Move South."
MOVE_WEST = "Move West."
MOVE_EAST = "Move East."
EXIT_ROOM = "Exit Room (doors or stairwell)."
MAKE_SUGGESTION = "Make a suggestion."
MAKE_ACCUSATION = "Make an accusation."
END_TURN = "End this turn."
LOOK_AT_HAND = "Look at hand."
NOTATION_GUIDE = "Print board notation guide."


def load_config() -> dict:
    """
    Read the client settings from the environment (and .env).

    Returns:
        A dict with ``board_file`` (str or None) and ``seed`` (int or None)

    Raises:
        ConfigurationError: if CLUE_SEED is not an integer
    """
    raw_seed = os.environ.get("CLUE_SEED", "").strip()
    seed = None
    if raw_seed:
        try:
            seed = int(raw_seed)
        except ValueError as e:
            raise ConfigurationError(f"CLUE_SEED must be an integer, got {raw_seed!r}") from e
    return {
        "board_file": os.environ.get("CLUE_BOARD_FILE") or None,
        "seed": seed,
    }


def input_number(minimum: int, maximum: int, read: Callable[[str], str] = input) -> int:
    """Read numbers until one between ``minimum`` and ``maximum`` (inclusive) is entered."""
    while True:
        answer = read("> ")
        try:
            number = int(answer)
            if minimum <= number <= maximum:
                return number
        except ValueError:
            pass
        print("Invalid input!")


def choose(options: List[str], read: Callable[[str], str] = input) -> int:
    """Print numbered options and return the index of the chosen one."""
    for i, option in enumerate(options, start=1):
        print(f"{i}) {option}")
    return input_number(1, len(options), read) - 1


def options_list(player: Player, engine: BoardEngine) -> List[str]:
    """The actions the player can currently take, in menu order."""
    options = []
    if player.steps_remaining > 0:
        if engine.can_go_north(player):
            options.append(MOVE_NORTH)
        if engine.can_go_south(player):
            options.append(MOVE_SOUTH)
        if engine.can_go_west(player):
            options.append(MOVE_WEST)
        if engine.can_go_east(player):
            options.append(MOVE_EAST)
    if engine.in_room(player):
        if player.steps_remaining > 0:
            options.append(EXIT_ROOM)
        if not player.suggested:
            options.append(MAKE_SUGGESTION)
    options.append(MAKE_ACCUSATION)
    options.append(END_TURN)
    options.append(LOOK_AT_HAND)
    options.append(NOTATION_GUIDE)
    return options


def print_board_notation_guide() -> None:
    print("-" * 54)
    print("digits represent players' tokens by uid")
    print()
    print("'x' represents an invalid place, no players can go there")
    print()
    print("'n', 's', 'w' and 'e' represent a door to a room, where:")
    print("- 'n' means only a \"Move North\" can enter the room")
    print("- 's' means only a \"Move South\" can enter the room")
    print("- 'w' means only a \"Move West\" can enter the room")
    print("- 'e' means only a \"Move East\" can enter the room")
    print()
    print("CAPITAL LETTERS represent a room, where:")
    print("- 'K' represents (K)itchen")
    print("- 'B' represents (B)allroom")
    print("- 'C' represents (C)onservatory")
    print("- 'I' represents B(I)lliard Room")
    print("- 'L' represents (L)ibrary")
    print("- 'S' represents (S)tudy")
    print("- 'H' represents (H)all")
    print("- 'O' represents L(O)unge")
    print("- 'N' represents Di(N)ing Room")
    print()
    print("symbols represent a weapon, where:")
    for card, glyph in WEAPON_GLYPHS.items():
        print(f"- '{glyph}' represents {card.value}")
    print("Note weapons are only shown when they are in rooms.")
    print()
    print("A CAPITAL LETTER in the corner of another room is a stairwell,")
    print("e.g. the 'S' in the (K)itchen is a stairwell to the (S)tudy")
    print("-" * 54)
    print()


def prompt_claim(room: Optional[RoomCard], read: Callable[[str], str] = input) -> Claim:
    """Ask for a suspect and a weapon, and a room unless ``room`` is given."""
    print("Choose a Character:")
    suspect = list(SuspectCard)[choose([c.value for c in SuspectCard], read)]
    print("Choose a Weapon:")
    weapon = list(WeaponCard)[choose([w.value for w in WeaponCard], read)]
    if room is None:
        print("Choose a Room:")
        room = list(RoomCard)[choose([r.value for r in RoomCard], read)]
    return Claim(suspect=suspect, weapon=weapon, room=room)


def prompt_exit(player: Player, engine: BoardEngine, read: Callable[[str], str] = input):
    """Ask which door (or the stairwell) to leave the room by."""
    targets = engine.exit_options(player)
    labels = []
    for target in targets:
        if isinstance(target, Room):
            labels.append(f"Go to {target.name} by stairwell.")
        else:
            labels.append(f"Exit to {target}")
    return targets[choose(labels, read)]


def announce_result(result: AccusationResult, engine: BoardEngine) -> bool:
    """Print the outcome of an accusation. Returns True when the game is over."""
    if result == AccusationResult.ONE_PLAYER_LEFT:
        print("Wrong answer! Only one player left!!!")
        print(f"🏆 {engine.winner.name} WON!!!")
        return True
    if result == AccusationResult.WRONG_ANSWER:
        print("Wrong answer! YOU ARE OUT!!!")
        return False
    print("RIGHT ANSWER! YOU WON!!!")
    return True


def announce_refutation(refutation: Optional[Tuple[Player, Card]]) -> None:
    if refutation is None:
        print("No one can refute the suggestion!!!")
        return
    refuter, card = refutation
    print(f"{refuter.name} has the card {card}")


def execute_player_decision(player: Player, engine: BoardEngine, read: Callable[[str], str] = input) -> None:
    """
    Let the player act until they end their turn or accuse.

    Rejected actions are reported and the player is asked again.
    """
    while True:
        print()
        print(f"Dear {player}:")
        print(f"You have {player.steps_remaining} move(s) left.")
        print("Please make your choice:")
        options = options_list(player, engine)
        decision = options[choose(options, read)]

        try:
            if decision == MOVE_NORTH:
                engine.move_north(player)
                print(engine.render())
            elif decision == MOVE_SOUTH:
                engine.move_south(player)
                print(engine.render())
            elif decision == MOVE_WEST:
                engine.move_west(player)
                print(engine.render())
            elif decision == MOVE_EAST:
                engine.move_east(player)
                print(engine.render())
            elif decision == EXIT_ROOM:
                engine.exit_room(player, prompt_exit(player, engine, read))
                # Leaving a room costs a step
                player.steps_remaining -= 1
                print(engine.render())
            elif decision == MAKE_SUGGESTION:
                claim = prompt_claim(engine.room_of(player).card, read)
                refutation = engine.resolve_suggestion(player, claim)
                logger.info("%s suggested %s", player.name, claim)
                announce_refutation(refutation)
            elif decision == MAKE_ACCUSATION:
                claim = prompt_claim(None, read)
                result = engine.make_accusation(player, claim)
                logger.info("%s accused %s: %s", player.name, claim, result.name)
                announce_result(result, engine)
                return
            elif decision == END_TURN:
                return
            elif decision == LOOK_AT_HAND:
                print(player.hand_to_string())
            elif decision == NOTATION_GUIDE:
                print_board_notation_guide()
        except GameError as e:
            logger.info("Rejected %r for %s: %s", decision, player.name, e)
            print(f"❌ {e}")


def run_game(
    num_players: int,
    board_text: Optional[str] = None,
    rng: Optional[random.Random] = None,
    read: Callable[[str], str] = input,
) -> BoardEngine:
    """
    Play a complete game at the console.

    Args:
        num_players: Number of players (3-6)
        board_text: Board map text, the bundled board when None
        rng: Source of randomness for the deal, the dice and room squares
        read: Function used to read the players' answers

    Returns:
        The engine once somebody has won
    """
    rng = rng or random.Random()
    setup = GameSetup.create(num_players, board_text=board_text, rng=rng)
    engine = setup.engine

    print("Cards have been dealt!!!")
    print("You can look at your hand during your turn!!!")
    if setup.unused_cards:
        print()
        print("!!!NOTE THERE ARE UNUSED CARDS IN THIS GAME:")
        for card in setup.unused_cards:
            print(card)
    print()

    player = engine.alive_players[0]
    turn_count = 0
    while not engine.game_over:
        turn_count += 1
        roll = roll_die(rng)
        player.steps_remaining = roll
        logger.debug("Turn %d: %s rolled %d", turn_count, player.name, roll)

        print(engine.render())
        print(f"🎲 {player} rolls a {roll}.")
        execute_player_decision(player, engine, read)

        if engine.game_over:
            break
        player = engine.next_player(player)

    print("\n" + "=" * 60)
    print("🏁 GAME OVER!")
    print("=" * 60)
    print(f"Winner: {engine.winner.name}")
    print(f"Total Turns: {turn_count}")
    print(f"Solution: {engine.solution}")
    return engine


def main():
    """Main entry point."""
    args = sys.argv[1:]
    if len(args) > 1:
        print("Usage: python -m cluedo.main [board.txt]")
        sys.exit(1)

    try:
        config = load_config()
        board_file = args[0] if args else config["board_file"]
        board_text = load_board_text(board_file) if board_file else None
    except ConfigurationError as e:
        print(f"❌ Error: {e}")
        sys.exit(2)

    rng = random.Random(config["seed"])

    print("WELCOME TO THE CLUEDO GAME!!!")
    print(f"Please enter the number of players ({MIN_PLAYERS}-{MAX_PLAYERS}):")
    num_players = input_number(MIN_PLAYERS, MAX_PLAYERS)

    try:
        run_game(num_players, board_text=board_text, rng=rng)
    except ConfigurationError as e:
        print(f"❌ Error: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
