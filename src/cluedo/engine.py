"""
Board engine for Cluedo.

Holds the parsed board, the players still in the game, the weapon tokens and
the hidden solution, and is the only thing that moves tokens during play.

Rules implemented:
- A roll gives a number of steps; each step is one square north, south, west or east
- Corridor squares only: room squares and 'x' squares cannot be stepped on
- A door can only be stepped on when moving in the door's direction,
  and doing so puts the player straight onto a random square inside the room
- Inside a room a player can only leave through one of its doors or its stairwell
- Suggestions are made in a room, about that room
- The suggested suspect and weapon are brought into the suggester's room
- Refutation goes clockwise (ascending ids, wrapping) starting after the suggester
- A wrong accusation takes the accuser out; the last player standing wins

Every action checks all of its preconditions before touching any state, so a
rejected action (IllegalActionError) leaves the game exactly as it was.
"""

import random
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from cluedo.board_map import (
    INVALID,
    BoardMap,
    Direction,
    Position,
    Room,
    is_entrance,
    is_room_letter,
)
from cluedo.cards import Card, Claim
from cluedo.errors import ConfigurationError, IllegalActionError, InvariantViolation
from cluedo.tokens import Player, Token, WeaponToken


class AccusationResult(Enum):
    ONE_PLAYER_LEFT = 0
    WRONG_ANSWER = 1
    RIGHT_ANSWER = 2


class BoardEngine:
    """The state of a game in progress and every rule that changes it."""

    def __init__(
        self,
        board: BoardMap,
        players: Iterable[Player],
        weapons: Iterable[WeaponToken],
        solution: Claim,
        rng: Optional[random.Random] = None,
    ):
        players = sorted(players, key=lambda p: p.uid)
        if len(players) < 2:
            raise ConfigurationError("A game needs at least two players")
        if len({p.uid for p in players}) != len(players):
            raise ConfigurationError("Player uids must be unique")
        if not isinstance(solution, Claim) or not solution.is_well_formed():
            raise ConfigurationError(f"Invalid solution: {solution!r}")

        self.board = board
        self.weapons: List[WeaponToken] = list(weapons)
        self.solution = solution
        self.rng = rng or random.Random()
        self.winner: Optional[Player] = None
        self._alive: Tuple[Player, ...] = tuple(players)

        for player in players:
            start = board.start_positions.get(player.uid)
            if start is None:
                raise ConfigurationError(f"Board has no start square for player {player.uid}")
            player.move_to(*start)

    @property
    def alive_players(self) -> List[Player]:
        """Players still in the game, in turn (uid) order."""
        return list(self._alive)

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    def is_alive(self, player: Player) -> bool:
        return any(p is player for p in self._alive)

    def next_player(self, player: Player) -> Player:
        """The living player whose turn follows ``player``'s (clockwise)."""
        later = [p for p in self._alive if p.uid > player.uid]
        return later[0] if later else self._alive[0]

    # ========================================================================
    # ROOM QUERIES
    # ========================================================================

    def in_room(self, token: Token) -> bool:
        return self.board.room_at(token.x, token.y) is not None

    def which_room(self, token: Token) -> Optional[Room]:
        """The room the token is in, or None when it is not in a room."""
        return self.board.room_at(token.x, token.y)

    def room_of(self, token: Token) -> Room:
        """The room the token is in. Only valid for tokens that are in a room."""
        room = self.which_room(token)
        if room is None:
            raise InvariantViolation(f"Given token is not in a room: {token.name} at [{token.x}, {token.y}]")
        return room

    # ========================================================================
    # GRID-BASED MOVEMENT METHODS
    # ========================================================================

    def can_move(self, player: Player, direction: Direction) -> bool:
        """
        Check if the player may take one step in ``direction``.

        False when the player is in a room (rooms are left with exit_room),
        when the step leaves the board, or when the target square is a room
        square, an 'x' or a door facing another direction.
        """
        if not isinstance(direction, Direction) or self.in_room(player):
            return False

        dx, dy = direction.delta
        target = self.board.cell(player.x + dx, player.y + dy)
        if target is None:
            return False
        if is_room_letter(target.cell_type) or target.cell_type == INVALID:
            return False
        if is_entrance(target.cell_type) and target.cell_type != direction.value:
            return False
        return True

    def can_go_north(self, player: Player) -> bool:
        return self.can_move(player, Direction.NORTH)

    def can_go_south(self, player: Player) -> bool:
        return self.can_move(player, Direction.SOUTH)

    def can_go_west(self, player: Player) -> bool:
        return self.can_move(player, Direction.WEST)

    def can_go_east(self, player: Player) -> bool:
        return self.can_move(player, Direction.EAST)

    def move(self, player: Player, direction: Direction) -> None:
        """
        Move the player one square in ``direction``.

        Uses one step and clears the player's suggested flag. Landing on a door
        puts the player on a random square inside that door's room.

        Raises:
            IllegalActionError: if ``direction`` is not a Direction, the player
                has no steps left or cannot go that way.
        """
        self._check_active(player)
        if not isinstance(direction, Direction):
            raise IllegalActionError(f"Invalid direction: {direction!r}")
        if player.steps_remaining <= 0:
            raise IllegalActionError(f"{player.name} has run out of steps")
        if not self.can_move(player, direction):
            raise IllegalActionError(f"{player.name} cannot go {direction.name.lower()}")

        dx, dy = direction.delta
        player.steps_remaining -= 1
        player.move_to(player.x + dx, player.y + dy)
        player.suggested = False

        entrance = self.board.entrance_at(player.x, player.y)
        if entrance is not None:
            self._place_in_room(player, entrance.room)

    def move_north(self, player: Player) -> None:
        self.move(player, Direction.NORTH)

    def move_south(self, player: Player) -> None:
        self.move(player, Direction.SOUTH)

    def move_west(self, player: Player) -> None:
        self.move(player, Direction.WEST)

    def move_east(self, player: Player) -> None:
        self.move(player, Direction.EAST)

    def exit_options(self, player: Player) -> List[Union[Position, Room]]:
        """Where the player can leave their room to: its doors, then its stairwell room."""
        room = self.which_room(player)
        if room is None:
            return []
        options: List[Union[Position, Room]] = list(room.entrance_positions())
        if room.stairwell is not None:
            options.append(room.stairwell)
        return options

    def exit_room(self, player: Player, target: Union[Position, Room, Tuple[int, int]]) -> None:
        """
        Leave the current room.

        ``target`` is one of the room's door squares (the player is put on it)
        or the room at the other end of the stairwell (the player is put on a
        random square in it). Clears the suggested flag. The step this costs is
        up to the caller; the engine does not take it.

        Raises:
            IllegalActionError: if the player is not in a room, has no steps
                left, or ``target`` is not a door or stairwell of the room.
        """
        self._check_active(player)
        room = self.which_room(player)
        if room is None:
            raise IllegalActionError("Cannot exit a room if not in a room")
        if player.steps_remaining <= 0:
            raise IllegalActionError("Cannot exit a room if there are no steps remaining")

        if isinstance(target, Room):
            if room.stairwell is None or target is not room.stairwell:
                raise IllegalActionError(f"There is no stairwell from the {room.name} to the {target.name}")
            self._place_in_room(player, target)
        else:
            if isinstance(target, tuple) and len(target) == 2:
                target = Position(*target)
            if not isinstance(target, Position):
                raise IllegalActionError(f"Invalid exit target: {target!r}")
            if target not in room.entrance_positions():
                raise IllegalActionError(f"{target} is not an entrance of the {room.name}")
            player.move_to(target.x, target.y)

        player.suggested = False

    def take_stairwell(self, player: Player) -> None:
        """Leave the current room through its stairwell."""
        room = self.which_room(player)
        if room is None or room.stairwell is None:
            raise IllegalActionError(f"{player.name} is not in a room with a stairwell")
        self.exit_room(player, room.stairwell)

    # ========================================================================
    # SUGGESTIONS AND ACCUSATIONS
    # ========================================================================

    def make_suggestion(self, player: Player, claim: Claim) -> Optional[Card]:
        """
        Make a suggestion from the room the player is in.

        Returns:
            The first suggested card (suspect, weapon, room order) held by the
            first player able to refute, or None if nobody can.
        """
        refutation = self.resolve_suggestion(player, claim)
        return refutation[1] if refutation else None

    def resolve_suggestion(self, player: Player, claim: Claim) -> Optional[Tuple[Player, Card]]:
        """
        Make a suggestion and report who refuted it.

        The suggested suspect (if that character is still playing) and the
        suggested weapon are brought to random squares of the room, whether or
        not anyone can refute. Players are then asked clockwise, starting after
        the suggester.

        Returns:
            ``(refuter, card)`` as found by find_refuter, or None if nobody can
            refute.
        """
        self._check_active(player)
        room = self.which_room(player)
        if room is None:
            raise IllegalActionError("Cannot make a suggestion if player not in a room")
        if player.suggested:
            raise IllegalActionError(f"{player.name} has already suggested")
        self._check_claim(claim)
        if claim.room != room.card:
            raise IllegalActionError(f"A suggestion must name the room you are in ({room.name})")

        for suspect in self._alive:
            if suspect.card == claim.suspect:
                self._place_in_room(suspect, room)
        for weapon in self.weapons:
            if weapon.card == claim.weapon:
                self._place_in_room(weapon, room)
        player.suggested = True

        return self.find_refuter(player, claim)

    def find_refuter(self, player: Player, claim: Claim) -> Optional[Tuple[Player, Card]]:
        """
        Find who refutes ``claim`` on behalf of ``player``, and with which card.

        Checks the living players with a higher uid first (ascending), then
        wraps around to the lower uids; the suggester is never asked.
        """
        self._check_claim(claim)
        later = [p for p in self._alive if p.uid > player.uid]
        earlier = [p for p in self._alive if p.uid < player.uid]
        for other in later + earlier:
            for card in claim.cards():
                if other.has_card(card):
                    return other, card
        return None

    def make_accusation(self, player: Player, claim: Claim) -> AccusationResult:
        """
        Accuse. A claim matching the solution in every slot wins the game.

        Otherwise the accuser is out of the game for good; if that leaves a
        single player, that player wins.
        """
        self._check_active(player)
        self._check_claim(claim)

        if claim.matches(self.solution):
            self.winner = player
            return AccusationResult.RIGHT_ANSWER

        self._alive = tuple(p for p in self._alive if p is not player)
        if len(self._alive) == 1:
            self.winner = self._alive[0]
            return AccusationResult.ONE_PLAYER_LEFT
        return AccusationResult.WRONG_ANSWER

    # ========================================================================
    # RENDERING
    # ========================================================================

    def render_grid(self) -> List[List[str]]:
        """The board as rows of characters with players and in-room weapons drawn on it."""
        grid = [list(line) for line in self.board.lines()]
        for player in self._alive:
            grid[player.x][player.y] = str(player.uid)
        for weapon in self.weapons:
            if self.in_room(weapon):
                grid[weapon.x][weapon.y] = weapon.glyph
        return grid

    def render(self) -> str:
        return "".join("".join(row) + "\n" for row in self.render_grid())

    def __str__(self):
        return self.render()

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _check_active(self, player: Player) -> None:
        if self.game_over:
            raise IllegalActionError("The game is over")
        if not self.is_alive(player):
            raise IllegalActionError(f"{player.name} is out of the game")

    def _check_claim(self, claim: Claim) -> None:
        if not isinstance(claim, Claim) or not claim.is_well_formed():
            raise IllegalActionError(f"A claim needs a suspect, a weapon and a room, in that order: {claim!r}")

    def _place_in_room(self, token: Token, room: Room) -> None:
        pos = room.random_position(self.rng)
        token.x = pos.x
        token.y = pos.y
