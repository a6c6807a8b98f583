"""
Tests for game setup: the hidden solution, the deal and weapon placement.
"""

import random

import pytest
from cluedo.board_map import DEFAULT_BOARD, parse_board
from cluedo.cards import RoomCard, SuspectCard, WeaponCard, all_cards
from cluedo.errors import ConfigurationError
from cluedo.game_setup import GameSetup, deal_cards, place_weapons, roll_die
from cluedo.tokens import Player, WeaponToken


class TestGameSetup:
    """Tests for GameSetup.create."""

    @pytest.mark.parametrize("num_players", [0, 1, 2, 7])
    def test_invalid_player_count(self, num_players):
        """Should reject fewer than 3 or more than 6 players."""
        with pytest.raises(ConfigurationError, match="Invalid number of players"):
            GameSetup.create(num_players, rng=random.Random(1))

    @pytest.mark.parametrize("num_players", [3, 4, 5, 6])
    def test_even_deal(self, num_players):
        """Every player should get the same number of cards."""
        setup = GameSetup.create(num_players, rng=random.Random(1))
        hand_sizes = {len(p.hand) for p in setup.players}
        assert hand_sizes == {18 // num_players}
        assert len(setup.unused_cards) == 18 % num_players

    def test_five_players_leave_three_cards(self):
        """18 cards over 5 players leaves 3 set aside."""
        setup = GameSetup.create(5, rng=random.Random(7))
        assert len(setup.unused_cards) == 3
        assert all(len(p.hand) == 3 for p in setup.players)

    def test_every_card_accounted_for_once(self):
        """Solution, hands and set-aside cards should cover the deck exactly once."""
        setup = GameSetup.create(4, rng=random.Random(3))
        seen = list(setup.solution.cards()) + list(setup.unused_cards)
        for player in setup.players:
            seen.extend(player.hand)
        assert len(seen) == 21
        assert set(seen) == set(all_cards())

    def test_solution_is_one_of_each_kind(self):
        """The solution should hold one card of each kind and never be dealt."""
        setup = GameSetup.create(3, rng=random.Random(11))
        assert isinstance(setup.solution.suspect, SuspectCard)
        assert isinstance(setup.solution.weapon, WeaponCard)
        assert isinstance(setup.solution.room, RoomCard)
        for player in setup.players:
            assert not player.hand & set(setup.solution.cards())

    def test_players_get_uids_in_order(self):
        """Players should get uids 1..N."""
        setup = GameSetup.create(4, rng=random.Random(2))
        assert [p.uid for p in setup.players] == [1, 2, 3, 4]
        assert setup.engine.alive_players == setup.players

    def test_weapons_start_in_different_rooms(self):
        """Each weapon should start in its own room."""
        setup = GameSetup.create(6, rng=random.Random(5))
        engine = setup.engine
        rooms = [engine.room_of(w) for w in setup.weapons]
        assert len(rooms) == 6
        assert len({room.short_name for room in rooms}) == 6

    def test_same_seed_same_game(self):
        """A seeded rng should reproduce the whole setup."""
        first = GameSetup.create(4, rng=random.Random(42))
        second = GameSetup.create(4, rng=random.Random(42))
        assert first.solution == second.solution
        assert [p.hand for p in first.players] == [p.hand for p in second.players]
        assert [w.position for w in first.weapons] == [w.position for w in second.weapons]

    def test_custom_board(self):
        """A board missing a player's start square should be rejected."""
        board_text = DEFAULT_BOARD.replace("4", " ")
        with pytest.raises(ConfigurationError, match="no start square for player 4"):
            GameSetup.create(4, board_text=board_text, rng=random.Random(1))

    def test_unusable_board(self):
        with pytest.raises(ConfigurationError):
            GameSetup.create(3, board_text="x#x\n", rng=random.Random(1))


class TestDealCards:
    """Tests for deal_cards."""

    def test_leftovers_set_aside(self):
        """Cards that cannot be shared evenly should be returned."""
        players = [Player(1), Player(2), Player(3)]
        deck = list(SuspectCard) + [WeaponCard.ROPE]
        unused = deal_cards(deck, players, random.Random(0))
        assert len(unused) == 1
        assert all(len(p.hand) == 2 for p in players)

    def test_deck_not_modified(self):
        """The caller's deck should be left as it was."""
        players = [Player(1), Player(2)]
        deck = list(WeaponCard)
        deal_cards(deck, players, random.Random(0))
        assert deck == list(WeaponCard)


class TestPlaceWeapons:
    """Tests for place_weapons."""

    def test_more_weapons_than_rooms(self):
        """Rooms should be reused when there are not enough of them."""
        board = parse_board("KKx\nxxx\n")
        weapons = [WeaponToken(card) for card in WeaponCard]
        place_weapons(weapons, board, random.Random(0))
        assert all(board.room_at(w.x, w.y) is board.rooms["K"] for w in weapons)

    def test_board_without_rooms(self):
        board = parse_board("x x\n")
        with pytest.raises(ConfigurationError, match="no rooms"):
            place_weapons([WeaponToken(WeaponCard.ROPE)], board, random.Random(0))


class TestRollDie:
    """Tests for roll_die."""

    def test_range(self):
        """Rolls should cover 1 to 6 and nothing else."""
        rng = random.Random(9)
        rolls = {roll_die(rng) for _ in range(200)}
        assert rolls == {1, 2, 3, 4, 5, 6}

    def test_default_rng(self):
        assert 1 <= roll_die() <= 6
