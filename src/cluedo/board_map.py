"""
Board map for the Cluedo board engine.

The board is described by a rectangular block of text, one character per
square (the same layout the bundled ``DEFAULT_BOARD`` uses):

    ' '          corridor square
    'x'          invalid square, nobody can stand on it
    'n' 's' 'w' 'e'
                 a door into the adjacent room; a player may only step onto
                 it while moving in that compass direction ('n' = moving north)
    'A' - 'Z'    a square belonging to the room with that letter
    '0' - '9'    start square of the player with that id (a corridor square)

Rooms, doors and stairwells are never listed by hand. ``parse_board`` derives
them from the grid: every square carrying a room's letter belongs to that room
wherever it is on the map, and two different room letters touching each other
form a stairwell between those rooms (e.g. the 'S' in the Kitchen's corner).
"""

import random
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

from cluedo.cards import RoomCard
from cluedo.errors import ConfigurationError


BLANK = " "
INVALID = "x"
ENTRANCE_CHARS = "nswe"

# Room letters used on the board (maps to RoomCard)
ROOM_CODES = {
    "K": RoomCard.KITCHEN,
    "B": RoomCard.BALLROOM,
    "C": RoomCard.CONSERVATORY,
    "I": RoomCard.BILLIARD_ROOM,
    "L": RoomCard.LIBRARY,
    "S": RoomCard.STUDY,
    "H": RoomCard.HALL,
    "O": RoomCard.LOUNGE,
    "N": RoomCard.DINING_ROOM,
}


class Direction(Enum):
    NORTH = "n"
    SOUTH = "s"
    WEST = "w"
    EAST = "e"

    @property
    def delta(self) -> Tuple[int, int]:
        """(row, column) offset of one step in this direction."""
        return {
            Direction.NORTH: (-1, 0),
            Direction.SOUTH: (1, 0),
            Direction.WEST: (0, -1),
            Direction.EAST: (0, 1),
        }[self]


@dataclass(frozen=True)
class Position:
    """
    One square of the board. ``x`` is the row, ``y`` the column.

    Two positions are equal when their coordinates are, whatever their cell
    type, so a bare (x, y) probe can be looked up in a room's position set.
    """
    x: int
    y: int
    cell_type: str = field(default=BLANK, compare=False)

    @property
    def coordinates(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __str__(self):
        return f"[{self.x}, {self.y}]"


@dataclass(eq=False)
class Room:
    """A room on the board: its squares, its doors and an optional stairwell."""
    short_name: str
    card: RoomCard
    positions: Set[Position] = field(default_factory=set, repr=False)
    entrances: List["Entrance"] = field(default_factory=list, repr=False)
    stairwell: Optional["Room"] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.card.value

    def contains(self, position: Position) -> bool:
        return position in self.positions

    def entrance_positions(self) -> List[Position]:
        return [entrance.position for entrance in self.entrances]

    def random_position(self, rng: Optional[random.Random] = None) -> Position:
        """Pick one of the room's squares uniformly at random."""
        rng = rng or random
        return rng.choice(sorted(self.positions, key=lambda p: (p.x, p.y)))


@dataclass(frozen=True)
class Entrance:
    """A door square, reachable only by a move in ``direction``, leading into ``room``."""
    position: Position
    direction: Direction
    room: Room


@dataclass
class BoardMap:
    """The parsed grid plus the room graph derived from it."""
    height: int
    width: int
    cells: List[List[Position]]
    rooms: Dict[str, Room]
    start_positions: Dict[int, Tuple[int, int]]
    entrances: Dict[Tuple[int, int], Entrance] = field(default_factory=dict)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.height and 0 <= y < self.width

    def cell(self, x: int, y: int) -> Optional[Position]:
        """The square at (x, y), or None when off the board."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[x][y]

    def room_at(self, x: int, y: int) -> Optional[Room]:
        """The room owning the square at (x, y); None for corridors, doors and walls."""
        pos = self.cell(x, y)
        if pos is None or not is_room_letter(pos.cell_type):
            return None
        return self.rooms[pos.cell_type]

    def entrance_at(self, x: int, y: int) -> Optional[Entrance]:
        return self.entrances.get((x, y))

    def room_for_card(self, card: RoomCard) -> Optional[Room]:
        for room in self.rooms.values():
            if room.card == card:
                return room
        return None

    def neighbours(self, x: int, y: int) -> Iterator[Position]:
        """Orthogonally adjacent squares that are on the board (no diagonals)."""
        for direction in Direction:
            dx, dy = direction.delta
            pos = self.cell(x + dx, y + dy)
            if pos is not None:
                yield pos

    def positions(self) -> Iterator[Position]:
        for row in self.cells:
            yield from row

    def lines(self) -> List[str]:
        """The static board as text, one string per row."""
        return ["".join(pos.cell_type for pos in row) for row in self.cells]


def is_room_letter(char: str) -> bool:
    return len(char) == 1 and char in string.ascii_uppercase


def is_entrance(char: str) -> bool:
    return len(char) == 1 and char in ENTRANCE_CHARS


def parse_board(text: str) -> BoardMap:
    """
    Parse board text into a BoardMap.

    Builds the grid, records the start square of every digit, then derives the
    rooms, attaches each door to the single room it touches and links
    neighbouring rooms by stairwells.

    Raises:
        ConfigurationError: if the text is empty, not rectangular, contains an
            unknown character or room letter, or a door does not touch exactly
            one room.
    """
    lines = text.splitlines()
    if not lines or not lines[0]:
        raise ConfigurationError("Board is empty")

    width = len(lines[0])
    cells: List[List[Position]] = []
    start_positions: Dict[int, Tuple[int, int]] = {}

    for x, line in enumerate(lines):
        if len(line) != width:
            raise ConfigurationError(
                f"Board is not rectangular: row {x} has {len(line)} squares, expected {width}"
            )
        row = []
        for y, char in enumerate(line):
            if char in string.digits:
                player_id = int(char)
                if player_id in start_positions:
                    raise ConfigurationError(f"Start square for player {player_id} appears twice")
                start_positions[player_id] = (x, y)
                char = BLANK
            elif char not in (BLANK, INVALID) and not is_entrance(char) and not is_room_letter(char):
                raise ConfigurationError(f"Unknown board character {char!r} at [{x}, {y}]")
            row.append(Position(x, y, char))
        cells.append(row)

    board = BoardMap(
        height=len(cells),
        width=width,
        cells=cells,
        rooms={},
        start_positions=start_positions,
    )
    _create_rooms(board)
    _add_entrances(board)
    _add_stairwells(board)
    return board


def _create_rooms(board: BoardMap) -> None:
    """One room per distinct letter; every square with that letter belongs to it."""
    letters = sorted({pos.cell_type for pos in board.positions() if is_room_letter(pos.cell_type)})
    for letter in letters:
        if letter not in ROOM_CODES:
            raise ConfigurationError(f"Invalid room short name: {letter}")
        board.rooms[letter] = Room(short_name=letter, card=ROOM_CODES[letter])

    for pos in board.positions():
        if is_room_letter(pos.cell_type):
            board.rooms[pos.cell_type].positions.add(pos)


def _add_entrances(board: BoardMap) -> None:
    for pos in board.positions():
        if not is_entrance(pos.cell_type):
            continue
        adjacent = {
            n.cell_type for n in board.neighbours(pos.x, pos.y) if is_room_letter(n.cell_type)
        }
        if len(adjacent) != 1:
            raise ConfigurationError(
                f"Entrance at {pos} must touch exactly one room, found {len(adjacent)}"
            )
        room = board.rooms[adjacent.pop()]
        entrance = Entrance(pos, Direction(pos.cell_type), room)
        room.entrances.append(entrance)
        board.entrances[pos.coordinates] = entrance


def _add_stairwells(board: BoardMap) -> None:
    """Link two different rooms whose squares touch, in both directions."""
    for pos in board.positions():
        if not is_room_letter(pos.cell_type):
            continue
        room = board.rooms[pos.cell_type]
        for neighbour in board.neighbours(pos.x, pos.y):
            if not is_room_letter(neighbour.cell_type) or neighbour.cell_type == pos.cell_type:
                continue
            other = board.rooms[neighbour.cell_type]
            for a, b in ((room, other), (other, room)):
                if a.stairwell is not None and a.stairwell is not b:
                    raise ConfigurationError(
                        f"{a.name} has stairwells to both {a.stairwell.name} and {b.name}"
                    )
                a.stairwell = b


def load_board_text(path: str) -> str:
    """Read a board file. An unreadable file is a ConfigurationError."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ConfigurationError(f"Error processing board file {path}: {e}") from e


# ============================================================================
# DEFAULT BOARD
# 25 rows x 24 columns. Kitchen/Study and Conservatory/Lounge are linked by
# stairwells: the 'S' in the Kitchen's corner, the 'K' in the Study's corner,
# the 'O' in the Conservatory's corner and the 'C' in the Lounge's corner.
# ============================================================================

BOARD_LAYOUT = [
    "xxxxxxx3xxxxxxxx4xxxxxxx",
    "SKKKKK  BBBBBBBB  CCCCCO",
    "KKKKKK  BBBBBBBB  CCCCCC",
    "KKKKKK  BBBBBBBB  CCCCCC",
    "KKKKKK  eBBBBBBw  eCCCCC",
    "KKKKnK  BBBBBBBB  CCCCCC",
    "x       BBBnBBBB       x",
    "x                      5",
    "x                 IIIIII",
    "NNNNNN            IIIIII",
    "NNNNNN   xxxxxx   eIIIII",
    "NNNNNw   xxxxxx   IIIIII",
    "NNNNNN   xxxxxx   IIIIII",
    "NNNNNN   xxxxxx        6",
    "NNNNNN   xxxxxx   LLsLLL",
    "NNnNNN            LLLLLL",
    "x                 LLLLLL",
    "x                 LLLLLL",
    "x        HHsHHH   LLLLLL",
    "OOOsOOO  HHHHHH        x",
    "OOOOOOO  HHHHHw   SSsSSS",
    "OOOOOOw  HHHHHH   SSSSSS",
    "OOOOOOO  HHHHHH   SSSSSS",
    "OOOOOOO  HHHHHH   SSSSSS",
    "COOOOOOx1HHHHHH2xxSSSSSK",
]

DEFAULT_BOARD = "\n".join(BOARD_LAYOUT) + "\n"
