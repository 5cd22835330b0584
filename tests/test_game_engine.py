import pytest

from holdem.errors import EngineError
from holdem.game import GameEngine
from holdem.models import Action, ActionType, Phase, TableConfig

from .helpers import (
    ScriptedCollaborator,
    auto_complete_hand,
    create_engine,
    perform_actions,
    rig_deck,
    start_hand,
)


def test_start_hand_assigns_button_blinds_and_hole_cards():
    engine = create_engine(seats=4, sb=10, bb=20)
    ctx = start_hand(engine)
    assert ctx.button == 0
    pre_events = engine.consume_pre_events()
    hole_events = [event for event in pre_events if event["ev"] == "HOLE_CARDS"]
    assert [event["seat"] for event in hole_events] == [1, 2, 3, 0]
    assert all(len(event["cards"]) == 2 for event in hole_events)
    assert pre_events[-1] == {"ev": "POST_BLINDS", "sb_seat": 1, "bb_seat": 2, "sb": 10, "bb": 20}
    assert engine.seats[1].is_small_blind and engine.seats[2].is_big_blind
    assert ctx.pot == 30
    assert engine.consume_pre_events() == []


def test_heads_up_button_posts_small_blind_and_acts_first():
    engine = GameEngine(TableConfig(seats=2, starting_stack=1000, sb=10, bb=20))
    seat_btn = engine.assign_seat("Button")
    seat_bb = engine.assign_seat("BigBlind")
    ctx = engine.start_hand(seed=123)
    assert ctx.button == seat_btn.seat
    blinds = [event for event in engine.consume_pre_events() if event["ev"] == "POST_BLINDS"][0]
    assert blinds["sb_seat"] == seat_btn.seat
    assert blinds["bb_seat"] == seat_bb.seat
    assert engine.next_actor() == seat_btn.seat


def test_heads_up_small_blind_fold_awards_blinds_to_big_blind():
    engine = create_engine(seats=2, starting_stack=20_000, sb=50, bb=100)
    ctx = start_hand(engine)
    assert engine.next_actor() == 0
    events = engine.apply_action(0, ActionType.FOLD)
    assert {"ev": "POT_AWARD", "seat": 1, "amount": 150} in events
    assert engine.is_hand_complete()
    assert ctx.community == []
    assert engine.seats[0].stack == 19_950
    # The big blind gets its own 100 back plus the small blind.
    assert engine.seats[1].stack == 20_050
    assert engine.total_chips() == 40_000
    assert ctx.pot == 0
    assert ctx.winners == [1]


def test_showdown_tie_splits_pot_evenly(monkeypatch):
    engine = create_engine(seats=2, starting_stack=20_000, sb=50, bb=100)
    # Deal order: seat 1, seat 0, seat 1, seat 0, burn, flop, burn, turn, burn, river.
    rig_deck(monkeypatch, ["2c", "4c", "3d", "5s", "9s", "Kh", "Kd", "Jh", "8s", "Jd", "7s", "As"])
    ctx = engine.start_hand()
    perform_actions(engine, [(0, ActionType.RAISE, 400), (1, ActionType.CALL, None)])
    assert ctx.pot == 1000
    events = auto_complete_hand(engine)

    shows = [event for event in events if event["ev"] == "SHOWDOWN"]
    assert [event["rank"] for event in shows] == ["two_pair", "two_pair"]
    awards = [event for event in events if event["ev"] == "POT_AWARD"]
    assert awards == [
        {"ev": "POT_AWARD", "seat": 0, "amount": 500},
        {"ev": "POT_AWARD", "seat": 1, "amount": 500},
    ]
    assert [seat.stack for seat in engine.seats] == [20_000, 20_000]
    assert ctx.winners == [0, 1]


def test_best_hand_wins_at_showdown(monkeypatch):
    engine = create_engine(seats=2, starting_stack=1_000, sb=10, bb=20)
    rig_deck(monkeypatch, ["Ah", "2c", "Ad", "7d", "3s", "As", "9h", "4c", "5s", "Kd", "6s", "Qc"])
    ctx = engine.start_hand()
    events = auto_complete_hand(engine)
    assert ctx.winners == [1]
    assert {"ev": "POT_AWARD", "seat": 1, "amount": 40} in events
    assert engine.seats[1].stack == 1_020
    assert engine.seats[0].stack == 980


def test_community_cards_follow_streets_with_burns():
    engine = create_engine(seats=3, sb=10, bb=20)
    ctx = start_hand(engine, seed=5)
    deck_size = len(ctx.deck)
    assert deck_size == 52 - 6

    phases = []
    while not engine.is_hand_complete():
        phases.append((ctx.phase, len(ctx.community)))
        actor = engine.next_actor()
        menu = engine.legal_actions(actor)
        action = ActionType.CHECK if ActionType.CHECK in menu.legal else ActionType.CALL
        engine.apply_action(actor, action)

    assert (Phase.FLOP, 3) in phases
    assert (Phase.TURN, 4) in phases
    assert (Phase.RIVER, 5) in phases
    assert len(ctx.community) == 5
    assert len(ctx.deck) == deck_size - 3 - 5
    assert ctx.phase == Phase.SHOWDOWN


def test_dealt_cards_are_disjoint():
    engine = create_engine(seats=6, sb=10, bb=20)
    ctx = start_hand(engine, seed=99)
    auto_complete_hand(engine)
    dealt = [card for seat in engine.seats for card in seat.hole_cards] + ctx.community
    assert len(dealt) == 17
    assert len(set(dealt)) == 17
    assert not set(dealt) & set(ctx.deck.cards)


def test_full_table_of_22_uses_the_whole_deck():
    engine = create_engine(seats=22, starting_stack=1_000, sb=10, bb=20)
    ctx = start_hand(engine, seed=1)
    auto_complete_hand(engine)
    assert engine.is_hand_complete()
    assert len(ctx.community) == 5
    assert len(ctx.deck) == 0


def test_fold_cascade_post_flop_skips_remaining_streets():
    engine = create_engine(seats=3, starting_stack=300, sb=10, bb=20)
    ctx = start_hand(engine, seed=50)
    perform_actions(engine, [(0, ActionType.CALL, None), (1, ActionType.CALL, None), (2, ActionType.CHECK, None)])
    assert ctx.phase == Phase.FLOP

    events = perform_actions(engine, [(1, ActionType.RAISE, 20), (2, ActionType.FOLD, None), (0, ActionType.FOLD, None)])
    assert engine.is_hand_complete()
    assert len(ctx.community) == 3
    assert not any(event["ev"] in ("TURN", "SHOWDOWN") for event in events)
    assert {"ev": "POT_AWARD", "seat": 1, "amount": 80} in events
    assert engine.seats[1].stack == 300 + 40


def test_chips_are_conserved_through_every_action():
    engine = create_engine(seats=4, starting_stack=500, sb=10, bb=20)
    total = engine.total_chips()
    for seed in range(30):
        ctx = start_hand(engine, seed=seed)
        step = 0
        while not engine.is_hand_complete():
            actor = engine.next_actor()
            menu = engine.legal_actions(actor)
            if step % 3 == 0 and menu.can_raise:
                engine.apply_action(actor, ActionType.RAISE, menu.min_raise)
            elif ActionType.CHECK in menu.legal:
                engine.apply_action(actor, ActionType.CHECK)
            else:
                engine.apply_action(actor, ActionType.CALL)
            step += 1
            assert engine.total_chips() == total
            assert ctx.pot == sum(seat.total_in_pot for seat in engine.seats)
        if engine.is_match_over():
            break
    assert sum(seat.stack for seat in engine.seats) == total


def test_button_rotates_and_skips_busted_seats():
    engine = create_engine(seats=3, starting_stack=200, sb=5, bb=10)
    engine.seats[1].stack = 0
    ctx1 = start_hand(engine, seed=21)
    assert ctx1.button == 0
    assert not engine.seats[1].in_hand
    assert not engine.seats[1].hole_cards
    auto_complete_hand(engine)
    assert engine.button == 2
    ctx2 = start_hand(engine, seed=22)
    assert ctx2.button == 2
    assert ctx2.hand_id != ctx1.hand_id


def test_short_stack_posts_what_it_has_for_blind():
    engine = create_engine(seats=3, starting_stack=200, sb=10, bb=20)
    engine.seats[2].stack = 15
    ctx = start_hand(engine)
    blinds = [event for event in engine.consume_pre_events() if event["ev"] == "POST_BLINDS"][0]
    assert blinds["bb"] == 15
    assert engine.seats[2].stack == 0
    assert ctx.betting.state.current_bet == 15


def test_eliminated_seat_is_reported(monkeypatch):
    engine = create_engine(seats=2, starting_stack=100, sb=10, bb=20)
    rig_deck(monkeypatch, ["7c", "Ah", "2d", "Ad", "3s", "9h", "Jc", "4d", "5s", "Kc", "6s", "8s"])
    engine.start_hand()
    events = perform_actions(engine, [(0, ActionType.RAISE, 80), (1, ActionType.CALL, None)])
    assert [seat.stack for seat in engine.seats] == [0, 0]
    events += auto_complete_hand(engine)
    assert {"ev": "ELIMINATED", "seat": 1} in events
    assert [seat.stack for seat in engine.seats] == [200, 0]
    assert engine.is_match_over()
    assert engine.match_result_payload()["winner"]["seat"] == 0


def test_start_hand_rejects_hand_in_progress_and_short_tables():
    engine = create_engine(seats=3)
    start_hand(engine)
    with pytest.raises(EngineError, match="already in progress"):
        engine.start_hand()

    lonely = GameEngine(TableConfig(seats=2))
    lonely.assign_seat("Solo")
    with pytest.raises(EngineError, match="Not enough active players"):
        lonely.start_hand()


def test_actions_require_a_hand():
    engine = create_engine(seats=2)
    assert engine.next_actor() is None
    with pytest.raises(EngineError, match="Hand not in progress"):
        engine.apply_action(0, ActionType.FOLD)


def test_table_capacity_and_seat_names():
    engine = GameEngine(TableConfig(seats=3))
    alpha = engine.assign_seat("Alpha")
    engine.assign_seat("Beta")
    assert engine.assign_seat(" alpha ") is alpha
    engine.assign_seat("Gamma")
    with pytest.raises(RuntimeError, match="Table is full"):
        engine.assign_seat("Overflow")
    with pytest.raises(ValueError, match="NAME_REQUIRED"):
        engine.assign_seat("   ")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"seats": 1},
        {"seats": 23},
        {"starting_stack": 0},
        {"sb": 0},
        {"sb": 200, "bb": 100},
    ],
)
def test_table_config_validation(kwargs):
    with pytest.raises(ValueError):
        TableConfig(**kwargs)


def test_match_result_payload_when_match_over():
    engine = GameEngine(TableConfig(seats=2, starting_stack=100))
    engine.assign_seat("Alpha")
    seat_b = engine.assign_seat("Beta")
    seat_b.stack = 0
    assert engine.is_match_over()
    payload = engine.match_result_payload()
    assert payload["winner"]["name"] == "Alpha"
    assert any(entry["name"] == "Beta" for entry in payload["final_stacks"])


def test_play_hand_drives_collaborator_until_complete():
    engine = create_engine(seats=2, starting_stack=20_000, sb=50, bb=100)
    table = ScriptedCollaborator({0: [Action(ActionType.FOLD)]})
    ctx = engine.play_hand(table, seed=3)
    assert ctx.complete
    assert table.events[0]["ev"] == "START_HAND"
    assert table.of_type("POT_AWARD") == [{"ev": "POT_AWARD", "seat": 1, "amount": 150}]
    assert table.of_type("END_HAND")[0]["winners"] == [1]
    assert [seat for seat, _ in table.prompts] == [0]


def test_play_hand_reprompts_after_illegal_action():
    engine = create_engine(seats=2, sb=10, bb=20)
    table = ScriptedCollaborator(
        {
            0: [Action(ActionType.CHECK), Action(ActionType.RAISE, 5), Action(ActionType.FOLD)],
        }
    )
    engine.play_hand(table, seed=8)
    illegal = table.of_type("ILLEGAL_ACTION")
    assert [event["msg"] for event in illegal] == ["Cannot check when facing a bet", "Raise below minimum of 20"]
    assert [seat for seat, _ in table.prompts] == [0, 0, 0]
    assert table.of_type("FOLD") == [{"ev": "FOLD", "seat": 0}]


def test_play_hand_to_showdown_emits_streets_in_order():
    engine = create_engine(seats=3, sb=10, bb=20)
    table = ScriptedCollaborator()
    engine.play_hand(table, seed=17)
    streets = [event["ev"] for event in table.events if event["ev"] in ("FLOP", "TURN", "RIVER", "SHOWDOWN")]
    assert streets == ["FLOP", "TURN", "RIVER", "SHOWDOWN", "SHOWDOWN", "SHOWDOWN"]
    assert sum(event["amount"] for event in table.of_type("POT_AWARD")) == 60
