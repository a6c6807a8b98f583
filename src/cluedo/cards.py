"""
Cards for the Cluedo board engine.

There are three closed sets of cards: six suspects, six weapons and nine
rooms. A suggestion, an accusation and the hidden solution are all a
``Claim``: one card from each set, always in suspect -> weapon -> room order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class CardCategory(Enum):
    SUSPECT = "suspect"
    WEAPON = "weapon"
    ROOM = "room"


class SuspectCard(Enum):
    MISS_SCARLETT = "Miss Scarlett"
    COLONEL_MUSTARD = "Colonel Mustard"
    MRS_WHITE = "Mrs. White"
    THE_REVEREND_GREEN = "The Reverend Green"
    MRS_PEACOCK = "Mrs. Peacock"
    PROFESSOR_PLUM = "Professor Plum"

    @property
    def category(self) -> CardCategory:
        return CardCategory.SUSPECT

    def __str__(self):
        return self.value


class WeaponCard(Enum):
    CANDLESTICK = "Candlestick"
    DAGGER = "Dagger"
    LEAD_PIPE = "Lead Pipe"
    REVOLVER = "Revolver"
    ROPE = "Rope"
    SPANNER = "Spanner"

    @property
    def category(self) -> CardCategory:
        return CardCategory.WEAPON

    def __str__(self):
        return self.value


class RoomCard(Enum):
    KITCHEN = "Kitchen"
    BALLROOM = "Ballroom"
    CONSERVATORY = "Conservatory"
    BILLIARD_ROOM = "Billiard Room"
    LIBRARY = "Library"
    STUDY = "Study"
    HALL = "Hall"
    LOUNGE = "Lounge"
    DINING_ROOM = "Dining Room"

    @property
    def category(self) -> CardCategory:
        return CardCategory.ROOM

    def __str__(self):
        return self.value


Card = Union[SuspectCard, WeaponCard, RoomCard]

# Slot order of a claim
CLAIM_SLOTS = (SuspectCard, WeaponCard, RoomCard)
CLAIM_CATEGORIES = (CardCategory.SUSPECT, CardCategory.WEAPON, CardCategory.ROOM)


def all_cards() -> list:
    """Every card in the game, suspects first, then weapons, then rooms."""
    return list(SuspectCard) + list(WeaponCard) + list(RoomCard)


@dataclass(frozen=True)
class Claim:
    """A (suspect, weapon, room) triple used for suggestions, accusations and the solution."""
    suspect: SuspectCard
    weapon: WeaponCard
    room: RoomCard

    def cards(self) -> Tuple[Card, Card, Card]:
        return (self.suspect, self.weapon, self.room)

    def is_well_formed(self) -> bool:
        """True when every slot holds a card of that slot's category."""
        return all(
            getattr(card, "category", None) == category
            for card, category in zip(self.cards(), CLAIM_CATEGORIES)
        )

    def matches(self, other: "Claim") -> bool:
        """Slot-by-slot comparison: suspect with suspect, weapon with weapon, room with room."""
        return all(mine == theirs for mine, theirs in zip(self.cards(), other.cards()))

    def __str__(self):
        return f"{self.suspect} with the {self.weapon} in the {self.room}"
