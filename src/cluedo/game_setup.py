"""
Game setup for Cluedo: players, weapons, the hidden solution and the deal.

Only the number of cards that can be shared out evenly is dealt; the rest
are set aside face up (``unused_cards``).
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from cluedo.board_map import DEFAULT_BOARD, BoardMap, parse_board
from cluedo.cards import Card, Claim, RoomCard, SuspectCard, WeaponCard, all_cards
from cluedo.engine import BoardEngine
from cluedo.errors import ConfigurationError
from cluedo.tokens import Player, WeaponToken


logger = logging.getLogger(__name__)

MIN_PLAYERS = 3
MAX_PLAYERS = 6


def roll_die(rng: Optional[random.Random] = None) -> int:
    """Roll one six-sided die."""
    return (rng or random).randint(1, 6)


def choose_solution(rng: random.Random) -> Claim:
    """Pick one card of each kind at random."""
    return Claim(
        suspect=rng.choice(list(SuspectCard)),
        weapon=rng.choice(list(WeaponCard)),
        room=rng.choice(list(RoomCard)),
    )


def deal_cards(deck: List[Card], players: List[Player], rng: random.Random) -> List[Card]:
    """
    Deal ``deck`` evenly to ``players``, drawing one random card at a time.

    ``len(deck) % len(players)`` cards are drawn first and set aside, then
    every player draws ``len(deck) // len(players)`` cards.

    Returns:
        The cards that were set aside.
    """
    deck = list(deck)
    cards_each = len(deck) // len(players)

    unused = [_take_one(deck, rng) for _ in range(len(deck) % len(players))]
    for player in players:
        for _ in range(cards_each):
            player.hand.add(_take_one(deck, rng))
    return unused


def place_weapons(weapons: List[WeaponToken], board: BoardMap, rng: random.Random) -> None:
    """Put every weapon on a random square of a random room, one weapon per room while rooms last."""
    rooms = [board.rooms[letter] for letter in sorted(board.rooms)]
    if not rooms:
        raise ConfigurationError("Board has no rooms")

    if len(rooms) >= len(weapons):
        chosen = rng.sample(rooms, len(weapons))
    else:
        chosen = [rng.choice(rooms) for _ in weapons]

    for weapon, room in zip(weapons, chosen):
        pos = room.random_position(rng)
        weapon.move_to(pos.x, pos.y)


@dataclass
class GameSetup:
    """A freshly set up game: the engine plus what the table knows about the deal."""
    engine: BoardEngine
    players: List[Player]
    weapons: List[WeaponToken]
    solution: Claim
    unused_cards: List[Card] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        num_players: int,
        board_text: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> "GameSetup":
        """
        Set up a game for ``num_players`` players (3-6).

        Args:
            num_players: Number of players; they get uids 1..num_players
            board_text: Board map text, the bundled board when None
            rng: Source of randomness, for reproducible games

        Raises:
            ConfigurationError: for a bad player count or an unusable board
        """
        if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
            raise ConfigurationError(f"Invalid number of players: {num_players}")

        rng = rng or random.Random()
        board = parse_board(DEFAULT_BOARD if board_text is None else board_text)

        players = [Player(uid) for uid in range(1, num_players + 1)]
        weapons = [WeaponToken(card) for card in WeaponCard]
        solution = choose_solution(rng)
        logger.debug("Solution (hidden): %s", solution)

        deck = [card for card in all_cards() if card not in solution.cards()]
        unused = deal_cards(deck, players, rng)
        for player in players:
            logger.debug("Dealt %s: %s", player, player.hand_to_string())
        if unused:
            logger.info("%d card(s) set aside: %s", len(unused), ", ".join(str(c) for c in unused))

        place_weapons(weapons, board, rng)
        engine = BoardEngine(board, players, weapons, solution, rng=rng)

        return cls(
            engine=engine,
            players=players,
            weapons=weapons,
            solution=solution,
            unused_cards=unused,
        )


def _take_one(deck: List[Card], rng: random.Random) -> Card:
    return deck.pop(rng.randrange(len(deck)))
