import random

import pytest

from block_duel.ai import (
    ATTACKER_ROLE,
    DEFENDER_ROLE,
    AttackerAI,
    DefenderAI,
    RandomAttacker,
    RandomDefender,
    adversarial_choice,
    create_player,
)
from block_duel.cli import run_match
from block_duel.game import DEFENDER_SET, Clock, Coordinate, GameConfig, GameSession, SessionState
from tests.helpers import assert_caches_consistent


def make_session(**config):
    return GameSession(DEFENDER_SET, GameConfig(**config), clock=Clock(), rng=random.Random(5))


def test_adversary_picks_the_square_on_an_empty_pit():
    session = make_session()
    assert adversarial_choice(session) == "o"
    # never the same type twice in a row while others remain
    assert adversarial_choice(session, last_type="o") != "o"


def test_attacker_queues_on_its_first_poll():
    session = make_session()
    attacker = AttackerAI(session, interval_ms=100)
    session.clock.advance(99)
    assert session.current_piece is None

    session.clock.advance(1)
    assert session.current_piece.type_id == "o"
    assert attacker.last_type == "o"


def test_attacker_waits_while_a_type_is_queued():
    session = make_session()
    session.set_queued_type("-")
    session.hard_drop()
    session.set_queued_type("i")
    attacker = AttackerAI(session)
    session.clock.advance(100)
    assert session.queued_type == "i"
    assert attacker.last_type is None


def test_defender_places_a_bar_flat_against_a_wall():
    session = make_session()
    DefenderAI(session, interval_ms=200)
    session.set_queued_type("i")

    session.clock.advance(200)
    assert session.state is SessionState.LOCKING

    session.clock.advance(550)
    occupied = set(session.grid.occupancy)
    walls = [{Coordinate(x, 0) for x in range(4)}, {Coordinate(x, 0) for x in range(6, 10)}]
    assert occupied in walls


def test_defender_handles_each_piece_once():
    session = make_session()
    defender = RandomDefender(session, interval_ms=200, rng=random.Random(0))
    session.set_queued_type("o")
    session.clock.advance(200)
    handled = defender._handled
    assert handled is not None
    session.clock.advance(200)
    assert defender._handled is handled


def test_players_stop_when_the_session_ends():
    session = make_session()
    attacker = RandomAttacker(session)
    defender = DefenderAI(session)
    assert attacker.active and defender.active
    session.freeze()
    assert not attacker.active
    assert not defender.active
    assert session.clock.pending() == 0


def test_random_attacker_polls_at_the_default_interval():
    session = make_session()
    RandomAttacker(session, rng=random.Random(1))
    session.clock.advance(99)
    assert session.current_piece is None
    session.clock.advance(1)
    assert session.current_piece is not None


def test_create_player_by_kind():
    session = make_session()
    assert isinstance(create_player("ai", ATTACKER_ROLE, session), AttackerAI)
    assert isinstance(create_player("random", DEFENDER_ROLE, session), RandomDefender)
    assert create_player("none", DEFENDER_ROLE, session) is None
    with pytest.raises(ValueError):
        create_player("human", DEFENDER_ROLE, session)
    with pytest.raises(ValueError):
        create_player("ai", "spectator", session)


def test_random_match_ends_with_one_loser():
    coordinator = run_match(
        seed=4,
        left_attacker="random",
        left_defender="random",
        right_attacker="random",
        right_defender="random",
        config=GameConfig(width=6, depth=8),
    )
    assert coordinator.decided
    result = coordinator.result
    assert {result.winner, result.loser} == {"left", "right"}
    for session in coordinator.sessions.values():
        assert not session.playing
        assert session.current_piece is None
        assert_caches_consistent(session.grid)


def test_ai_match_keeps_pits_consistent():
    coordinator = run_match(seed=2, max_seconds=30, config=GameConfig(width=6, depth=8))
    for session in coordinator.sessions.values():
        assert session.pieces_locked > 0
        assert_caches_consistent(session.grid)
        assert all(0 <= xy.x < 6 and xy.y >= 0 for xy in session.grid.occupancy)
