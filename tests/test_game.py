import pytest

from aviary_battler import GameState, Outcome, Phase, Rarity, Side
from aviary_battler.config import MAX_ROSTER_SIZE, SHOP_SIZE, STARTING_CURRENCY, STARTING_HEALTH


def _unit_keys(units):
    return [(unit.template_id, unit.tier, unit.attack, unit.health) for unit in units]


def _idle_game(seed=0):
    game = GameState(seed=seed, start=False)
    game.ctx.phase = Phase.SHOP
    return game


def test_new_game_starts_in_shop_phase():
    game = GameState(seed=11)
    assert game.round == 1
    assert game.phase is Phase.SHOP
    assert game.player.health == game.ai.health == STARTING_HEALTH
    assert game.player.currency == STARTING_CURRENCY
    assert len(game.shop) == SHOP_SIZE
    # the AI can only spend its single coin on a common offer
    assert len(game.ai.roster) + game.ai.currency == 1
    assert game.pending_reward is None
    assert game.last_attack is None


def test_independent_games_do_not_share_state():
    first = GameState(seed=1)
    second = GameState(seed=1)
    first.purchase(0)
    assert len(second.player.roster) == 0
    assert _unit_keys(first.ai.roster) == _unit_keys(second.ai.roster)


def test_purchase_rejections_leave_state_unchanged(make_unit):
    game = _idle_game()
    game.player.currency = 1
    game.player.shop = [make_unit("eagle")]
    assert game.purchase(0) == (False, "Not enough currency")
    assert game.purchase(3) == (False, "Invalid offer")
    game.ctx.phase = Phase.BATTLE
    assert game.purchase(0) == (False, "Not in shop phase")
    assert game.player.currency == 1
    assert len(game.player.shop) == 1


def test_purchase_completing_triple_requires_reward_pick(make_unit):
    game = _idle_game(seed=4)
    game.player.currency = 1
    game.player.roster = [make_unit("sparrow"), make_unit("sparrow")]
    game.player.shop = [make_unit("sparrow"), make_unit("robin")]

    success, message = game.purchase(0)
    assert success
    assert "Choose a reward" in message
    assert game.player.roster == []
    reward = game.pending_reward
    assert reward is not None
    assert all(unit.rarity is Rarity.UNCOMMON for unit in reward.candidates)

    assert game.end_shop_phase() == (False, "Reward pending")
    assert game.purchase(0) == (False, "Reward pending")
    assert game.pick_reward(7) == (False, "Invalid reward choice")

    chosen = reward.candidates[1]
    assert game.pick_reward(1)[0]
    assert game.pending_reward is None
    assert game.shop[0] is chosen
    assert game.serialize_offer(chosen)["cost"] == 0
    assert game.pick_reward(0) == (False, "No reward pending")

    assert game.purchase(0)[0]
    assert game.player.roster[-1] is chosen
    assert game.player.currency == 0


def test_full_roster_triple_purchase_then_merge(make_unit):
    game = _idle_game(seed=2)
    game.player.currency = 5
    game.player.roster = [make_unit(name) for name in ("sparrow", "sparrow", "robin", "robin", "blackbird")]
    game.player.shop = [make_unit("sparrow"), make_unit("jay")]
    assert game.purchase(1) == (False, "Roster full")
    assert game.purchase(0)[0]
    assert [unit.template_id for unit in game.player.roster] == ["robin", "robin", "blackbird"]
    assert len(game.player.roster) <= MAX_ROSTER_SIZE


def test_human_round_start_merge_blocks_pipeline(make_unit):
    game = GameState(seed=6, start=False)
    game.player.roster = [make_unit("robin") for _ in range(3)]
    assert game.start_shop_phase() is False
    assert game.pending_reward is not None
    assert game.shop == []
    assert game.ai.shop == []
    assert game.end_shop_phase() == (False, "Reward pending")

    assert game.pick_reward(0)[0]
    assert game.pending_reward is None
    assert len(game.shop) == SHOP_SIZE
    assert all(not offer.free_reward for offer in game.shop)
    assert game.end_shop_phase()[0]


def test_ai_round_start_merge_resolves_unattended(make_unit):
    game = GameState(seed=8, start=False)
    game.ai.roster = [make_unit("jay") for _ in range(3)]
    assert game.start_shop_phase() is True
    assert game.ai.count_copies("jay") < 3
    assert len(game.shop) == SHOP_SIZE


def test_rosters_roll_back_to_snapshot_after_battle(make_unit):
    game = _idle_game(seed=5)
    game.player.roster = [make_unit("eagle"), make_unit("owl")]
    game.ai.roster = [make_unit("sparrow")]
    player_snapshot = _unit_keys(game.player.roster)

    assert game.end_shop_phase() == (True, "Battle started")
    assert game.phase is Phase.BATTLE
    message = game.run_battle()

    assert message == "Next round!"
    assert game.round == 2
    assert game.phase is Phase.SHOP
    assert game.ai.health == STARTING_HEALTH - 13
    assert game.player.health == STARTING_HEALTH
    assert game.player.currency == 2
    assert _unit_keys(game.player.roster) == player_snapshot
    assert _unit_keys(game.ctx.snapshot[Side.AI]) == [("sparrow", 1, 2, 5)]
    assert game.ctx.last_battle.winner.value == "player"


def test_battle_damage_does_not_leak_into_snapshot(make_unit):
    game = _idle_game(seed=5)
    game.player.roster = [make_unit("sparrow")]
    game.ai.roster = [make_unit("robin")]
    game.end_shop_phase()
    game.advance()
    game.ctx.restore_snapshot()
    assert _unit_keys(game.player.roster) == [("sparrow", 1, 2, 5)]
    assert _unit_keys(game.ai.roster) == [("robin", 1, 1, 6)]


@pytest.mark.parametrize(
    "player_health, ai_health, expected, message",
    [
        (30, 5, Outcome.PLAYER_WIN, "You win!"),
        (-1, 5, Outcome.DRAW, "Draw! Both players lost all health."),
    ],
)
def test_terminal_conditions_after_overflow(make_unit, player_health, ai_health, expected, message):
    game = _idle_game(seed=5)
    game.player.health = player_health
    game.ai.health = ai_health
    game.player.roster = [make_unit("eagle"), make_unit("owl")]
    game.ai.roster = []
    game.end_shop_phase()
    assert game.advance() == (True, message)
    assert game.outcome is expected
    assert game.is_game_over()
    assert game.advance() == (False, "Game over")
    assert game.purchase(0) == (False, "Game over")


def test_loss_when_only_player_falls(make_unit):
    game = _idle_game(seed=5)
    game.player.health = 1
    game.ai.roster = [make_unit("robin")]
    game.end_shop_phase()
    game.run_battle()
    assert game.outcome is Outcome.AI_WIN
    assert game.message == "You lost!"
    assert game.player.health == 0


def test_mutual_wipe_advances_round_without_damage(make_fighter):
    game = _idle_game(seed=3)
    game.player.roster = [make_fighter(5, 5)]
    game.ai.roster = [make_fighter(5, 5)]
    game.end_shop_phase()
    game.run_battle()
    assert game.round == 2
    assert game.player.health == game.ai.health == STARTING_HEALTH
    assert game.ctx.last_battle.mutual_wipe
    assert game.player.roster[0].health == 5


def test_advance_outside_battle_is_rejected():
    game = GameState(seed=1)
    assert game.advance() == (False, "Not in battle phase")


def test_autoplay_reaches_terminal_outcome():
    game = GameState(seed=21)
    for _ in range(200):
        if game.is_game_over():
            break
        assert game.phase is Phase.SHOP
        assert game.player.currency >= 0
        game.autoplay_round()
        if not game.is_game_over():
            assert len(game.player.roster) <= MAX_ROSTER_SIZE
            assert game.player.currency == game.round
    assert game.is_game_over()
    assert game.outcome in set(Outcome)


def test_public_dict_exposes_render_state(make_fighter):
    game = GameState(seed=2)
    state = game.to_public_dict()
    assert state["round"] == 1
    assert state["phase"] == "shop"
    assert state["player"]["health"] == STARTING_HEALTH
    assert len(state["shop"]) == SHOP_SIZE
    assert {"cost", "rarity", "tier", "free_reward", "max_health"} <= set(state["shop"][0])
    assert state["pending_reward"] is None
    assert state["last_attack"] is None

    game.player.roster = [make_fighter(1, 20)]
    game.ai.roster = [make_fighter(1, 20)]
    game.end_shop_phase()
    game.advance()
    state = game.to_public_dict()
    assert state["phase"] == "battle"
    assert state["last_attack"]["attacker_index"] == 0
    assert state["last_attack"]["defender_index"] == 0


def test_run_battle_step_limit(make_fighter):
    game = _idle_game(seed=4)
    game.player.roster = [make_fighter(0, 5)]
    game.ai.roster = [make_fighter(0, 5)]
    game.end_shop_phase()
    with pytest.raises(RuntimeError):
        game.run_battle(max_steps=3)
    assert len(game.ctx.battle_log) == 3
