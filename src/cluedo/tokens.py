"""
Tokens: the things that stand on the board.

A token is anything with a board position and a card identity. Players and
weapons are the two kinds; the engine only relies on the ``Token`` protocol.
"""

from dataclasses import dataclass, field
from typing import Protocol, Set, Tuple

from cluedo.cards import CLAIM_SLOTS, Card, SuspectCard, WeaponCard
from cluedo.errors import ConfigurationError


# Player id -> character card; the id is also the turn order
PLAYER_CHARACTERS = {
    1: SuspectCard.MISS_SCARLETT,
    2: SuspectCard.COLONEL_MUSTARD,
    3: SuspectCard.MRS_WHITE,
    4: SuspectCard.THE_REVEREND_GREEN,
    5: SuspectCard.MRS_PEACOCK,
    6: SuspectCard.PROFESSOR_PLUM,
}

# How weapons are drawn on the text board
WEAPON_GLYPHS = {
    WeaponCard.CANDLESTICK: "+",
    WeaponCard.DAGGER: "-",
    WeaponCard.LEAD_PIPE: "*",
    WeaponCard.REVOLVER: "/",
    WeaponCard.ROPE: "=",
    WeaponCard.SPANNER: "?",
}


class Token(Protocol):
    x: int
    y: int

    @property
    def position(self) -> Tuple[int, int]: ...

    @property
    def card(self) -> Card: ...

    @property
    def name(self) -> str: ...


@dataclass(eq=False)
class Player:
    """A player in the game, identified by ``uid`` (1-6)."""
    uid: int
    x: int = 0
    y: int = 0
    hand: Set[Card] = field(default_factory=set)
    steps_remaining: int = 0
    suggested: bool = False  # Made a suggestion since the last move

    def __post_init__(self):
        if self.uid not in PLAYER_CHARACTERS:
            raise ConfigurationError(f"Invalid uid: {self.uid}")

    @property
    def card(self) -> SuspectCard:
        return PLAYER_CHARACTERS[self.uid]

    @property
    def name(self) -> str:
        return self.card.value

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def has_card(self, card: Card) -> bool:
        return card in self.hand

    def hand_to_string(self) -> str:
        """The hand in a stable, readable order (suspects, weapons, rooms)."""
        ordered = sorted(self.hand, key=_card_sort_key)
        return "[" + ", ".join(str(card) for card in ordered) + "]"

    def __str__(self):
        return f"{self.name} (uid: {self.uid})"


@dataclass(eq=False)
class WeaponToken:
    """A weapon piece; its card identity never changes."""
    card: WeaponCard
    x: int = 0
    y: int = 0

    @property
    def name(self) -> str:
        return self.card.value

    @property
    def glyph(self) -> str:
        return WEAPON_GLYPHS[self.card]

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


def _card_sort_key(card: Card) -> Tuple[int, int]:
    kind = type(card)
    return (CLAIM_SLOTS.index(kind), list(kind).index(card))
