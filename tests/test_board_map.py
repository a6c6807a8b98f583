"""
Tests for the board map parser and room builder.
"""

import pytest
from cluedo.board_map import (
    BOARD_LAYOUT,
    DEFAULT_BOARD,
    ROOM_CODES,
    Direction,
    Position,
    load_board_text,
    parse_board,
)
from cluedo.cards import RoomCard
from cluedo.errors import ConfigurationError


# A 6x7 board: the Kitchen has a door 'e' at [2, 3] that touches corridor
# squares on three sides, and an 'S' square next to it makes a stairwell.
MINI_BOARD = "\n".join([
    "xxxxxxx",
    "x1  KKx",
    "x  eKKx",
    "x2  KSx",
    "x3 xSSx",
    "xxxxxxx",
])


class TestPosition:
    """Positions compare by coordinates only."""

    def test_equal_when_same_coordinates(self):
        """Positions at the same square should be equal whatever their cell type."""
        assert Position(3, 4, "K") == Position(3, 4, " ")
        assert hash(Position(3, 4, "K")) == hash(Position(3, 4, "x"))

    def test_different_coordinates(self):
        """Swapped coordinates are a different square."""
        assert Position(3, 4, "K") != Position(4, 3, "K")

    def test_is_immutable(self):
        """Positions should be frozen."""
        pos = Position(1, 2, " ")
        with pytest.raises(AttributeError):
            pos.x = 5


class TestDefaultBoard:
    """Tests against the bundled board."""

    def test_dimensions(self):
        """Bundled board should be 25 rows of 24 squares."""
        board = parse_board(DEFAULT_BOARD)
        assert board.height == 25
        assert board.width == 24
        assert all(len(row) == 24 for row in BOARD_LAYOUT)

    def test_all_nine_rooms(self):
        """Every room letter should become a room with its card."""
        board = parse_board(DEFAULT_BOARD)
        assert set(board.rooms) == set(ROOM_CODES)
        assert {room.card for room in board.rooms.values()} == set(RoomCard)

    def test_room_names_follow_letters(self):
        """Room names should come from the letter mapping."""
        board = parse_board(DEFAULT_BOARD)
        assert board.rooms["K"].name == "Kitchen"
        assert board.rooms["I"].name == "Billiard Room"
        assert board.rooms["N"].name == "Dining Room"
        assert board.rooms["O"].name == "Lounge"

    def test_start_positions_become_corridor(self):
        """Digits should record start squares and be walkable corridor."""
        board = parse_board(DEFAULT_BOARD)
        assert board.start_positions == {
            1: (24, 8),
            2: (24, 15),
            3: (0, 7),
            4: (0, 16),
            5: (7, 23),
            6: (13, 23),
        }
        for x, y in board.start_positions.values():
            assert board.cell(x, y).cell_type == " "

    def test_rooms_are_keyed_by_letter_not_geometry(self):
        """The 'K' in the Study's corner belongs to the Kitchen."""
        board = parse_board(DEFAULT_BOARD)
        kitchen = board.rooms["K"]
        study = board.rooms["S"]
        assert kitchen.contains(Position(24, 23))
        assert not study.contains(Position(24, 23))
        assert study.contains(Position(1, 0))

    def test_stairwells_are_symmetric(self):
        """A stairwell should lead back to the room it came from."""
        board = parse_board(DEFAULT_BOARD)
        for room in board.rooms.values():
            if room.stairwell is not None:
                assert room.stairwell is not room
                assert room.stairwell.stairwell is room

    def test_stairwell_pairs(self):
        """Kitchen/Study and Conservatory/Lounge should be the only stairwells."""
        board = parse_board(DEFAULT_BOARD)
        assert board.rooms["K"].stairwell is board.rooms["S"]
        assert board.rooms["C"].stairwell is board.rooms["O"]
        for letter in "BINLH":
            assert board.rooms[letter].stairwell is None

    def test_entrances(self):
        """Doors should carry their direction and owning room."""
        board = parse_board(DEFAULT_BOARD)
        kitchen = board.rooms["K"]
        assert kitchen.entrance_positions() == [Position(5, 4)]
        assert kitchen.entrances[0].direction == Direction.NORTH
        assert kitchen.entrances[0].room is kitchen
        assert len(board.rooms["B"].entrances) == 3
        assert len(board.rooms["H"].entrances) == 2

    def test_every_entrance_belongs_to_one_room(self):
        """No door should be shared between rooms."""
        board = parse_board(DEFAULT_BOARD)
        owners = {}
        for room in board.rooms.values():
            for entrance in room.entrances:
                assert entrance.position.coordinates not in owners
                owners[entrance.position.coordinates] = room
        assert set(owners) == set(board.entrances)

    def test_room_at(self):
        """room_at should only report room squares."""
        board = parse_board(DEFAULT_BOARD)
        assert board.room_at(2, 2) is board.rooms["K"]
        assert board.room_at(7, 7) is None      # corridor
        assert board.room_at(5, 4) is None      # door
        assert board.room_at(-1, 0) is None     # off the board

    def test_room_for_card(self):
        """Rooms should be found by card."""
        board = parse_board(DEFAULT_BOARD)
        assert board.room_for_card(RoomCard.LIBRARY) is board.rooms["L"]

    def test_lines_round_trip_without_digits(self):
        """Board lines should match the layout with start digits blanked."""
        board = parse_board(DEFAULT_BOARD)
        lines = board.lines()
        assert lines[0] == "xxxxxxx xxxxxxxx xxxxxxx"
        assert lines[5] == BOARD_LAYOUT[5]


class TestMiniBoard:
    """Room derivation on a small hand-made board."""

    def test_door_attached_to_only_touching_room(self):
        """The door should join the only room it touches."""
        board = parse_board(MINI_BOARD)
        kitchen = board.rooms["K"]
        assert [e.position for e in kitchen.entrances] == [Position(2, 3)]
        assert kitchen.entrances[0].direction == Direction.EAST

    def test_stairwell_from_touching_letters(self):
        """Touching room letters should make a two-way stairwell."""
        board = parse_board(MINI_BOARD)
        assert board.rooms["K"].stairwell is board.rooms["S"]
        assert board.rooms["S"].stairwell is board.rooms["K"]

    def test_windows_line_endings(self):
        """CRLF line endings should parse like LF."""
        board = parse_board(MINI_BOARD.replace("\n", "\r\n") + "\r\n")
        assert board.height == 6
        assert board.width == 7


class TestMalformedBoards:
    """Unusable maps are configuration errors."""

    def test_empty_board(self):
        with pytest.raises(ConfigurationError, match="empty"):
            parse_board("")

    def test_ragged_rows(self):
        with pytest.raises(ConfigurationError, match="not rectangular"):
            parse_board("xxx\nxx\n")

    def test_unknown_character(self):
        with pytest.raises(ConfigurationError, match="Unknown board character"):
            parse_board("x#x\n")

    def test_unmapped_room_letter(self):
        with pytest.raises(ConfigurationError, match="Invalid room short name: Z"):
            parse_board("ZZ \n")

    def test_entrance_without_room(self):
        with pytest.raises(ConfigurationError, match="exactly one room"):
            parse_board("xnx\n")

    def test_entrance_between_two_rooms(self):
        with pytest.raises(ConfigurationError, match="exactly one room"):
            parse_board("KnB\n")

    def test_room_with_two_stairwells(self):
        with pytest.raises(ConfigurationError, match="stairwells to both"):
            parse_board("KSB\n")

    def test_duplicate_start_square(self):
        with pytest.raises(ConfigurationError, match="appears twice"):
            parse_board("1 1\n")


class TestLoadBoardText:
    """Reading board files."""

    def test_reads_file(self, tmp_path):
        """Should return the file contents."""
        path = tmp_path / "board.txt"
        path.write_text(MINI_BOARD)
        assert load_board_text(str(path)) == MINI_BOARD

    def test_missing_file(self, tmp_path):
        """Should wrap OS errors as configuration errors."""
        with pytest.raises(ConfigurationError, match="Error processing board file"):
            load_board_text(str(tmp_path / "missing.txt"))
