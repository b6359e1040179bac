from aviary_battler import DraftAgent, Side, SimulationContext


def _ai_ctx(roster, shop, currency):
    ctx = SimulationContext(seed=0)
    ctx.ai.roster = list(roster)
    ctx.ai.shop = list(shop)
    ctx.ai.currency = currency
    return ctx


def test_third_copy_upgrades_pair_in_place(make_unit):
    pair = [make_unit("jay"), make_unit("jay")]
    ctx = _ai_ctx(pair, [make_unit("jay")], currency=2)

    actions = DraftAgent().run_draft(ctx, Side.AI)

    jays = ctx.ai.copies("jay")
    assert len(jays) == 1
    upgraded = jays[0]
    assert (upgraded.tier, upgraded.attack, upgraded.health, upgraded.max_health) == (2, 4, 10, 10)
    assert all(unit is not upgraded for unit in pair)
    assert all(unit not in ctx.ai.roster for unit in pair)
    assert ctx.ai.shop == []
    assert ctx.ai.currency == 0
    assert actions == [{"type": "upgrade", "id": "jay", "tier": 2}]


def test_upgrade_builds_on_previous_tier(make_unit):
    pair = [make_unit("robin", tier=2), make_unit("robin", tier=2)]
    ctx = _ai_ctx(pair, [make_unit("robin")], currency=1)
    DraftAgent().run_draft(ctx, Side.AI)
    assert [unit.tier for unit in ctx.ai.roster] == [3]


def test_upgrade_takes_priority_then_rarest_offers(make_unit):
    ctx = _ai_ctx(
        [make_unit("jay"), make_unit("jay")],
        [make_unit("robin"), make_unit("sparrow"), make_unit("jay")],
        currency=4,
    )
    DraftAgent().run_draft(ctx, Side.AI)
    assert [unit.template_id for unit in ctx.ai.roster] == ["jay", "sparrow", "robin"]
    assert ctx.ai.roster[0].tier == 2
    assert ctx.ai.currency == 0


def test_buys_highest_rarity_affordable(make_unit):
    shop = [make_unit("sparrow"), make_unit("blackbird"), make_unit("jay"), make_unit("woodpecker"), make_unit("owl")]
    ctx = _ai_ctx([], shop, currency=3)
    DraftAgent().run_draft(ctx, Side.AI)
    assert [unit.template_id for unit in ctx.ai.roster] == ["owl"]
    assert ctx.ai.currency == 0


def test_rarity_ties_break_on_attack_then_list_order(make_unit):
    agent = DraftAgent()
    shop = [make_unit("robin"), make_unit("blackbird"), make_unit("sparrow")]
    assert agent.choose_offer(shop, 1) == 1
    shop = [make_unit("jay"), make_unit("woodpecker"), make_unit("eagle")]
    assert agent.choose_offer(shop, 2) == 1
    assert agent.choose_offer(shop, 0) is None


def test_free_reward_offer_is_affordable(make_unit):
    shop = [make_unit("sparrow"), make_unit("eagle", free_reward=True)]
    assert DraftAgent().choose_offer(shop, 1) == 1


def test_full_roster_stops_normal_buys(make_unit):
    roster = [make_unit(name) for name in ("sparrow", "robin", "blackbird", "woodpecker", "owl")]
    ctx = _ai_ctx(roster, [make_unit("eagle"), make_unit("jay")], currency=10)
    assert DraftAgent().run_draft(ctx, Side.AI) == []
    assert ctx.ai.currency == 10
    assert len(ctx.ai.shop) == 2


def test_full_roster_still_completes_triple(make_unit):
    roster = [make_unit(name) for name in ("sparrow", "sparrow", "robin", "blackbird", "owl")]
    ctx = _ai_ctx(roster, [make_unit("eagle"), make_unit("sparrow")], currency=1)
    DraftAgent().run_draft(ctx, Side.AI)
    assert len(ctx.ai.roster) == 4
    assert ctx.ai.copies("sparrow")[0].tier == 2


def test_no_currency_no_purchases(make_unit):
    ctx = _ai_ctx([], [make_unit("sparrow", free_reward=True)], currency=0)
    assert DraftAgent().run_draft(ctx, Side.AI) == []
    assert ctx.ai.roster == []


def test_stops_when_nothing_affordable(make_unit):
    ctx = _ai_ctx([], [make_unit("owl"), make_unit("jay"), make_unit("robin")], currency=2)
    DraftAgent().run_draft(ctx, Side.AI)
    assert [unit.template_id for unit in ctx.ai.roster] == ["jay"]
    assert ctx.ai.currency == 0
    assert [unit.template_id for unit in ctx.ai.shop] == ["owl", "robin"]


def test_upgrade_over_upgraded_pair_uses_offer_stats(make_unit):
    pair = [make_unit("jay", tier=2, attack=4, health=10, max_health=10), make_unit("jay")]
    ctx = _ai_ctx(pair, [make_unit("jay")], currency=2)
    DraftAgent().run_draft(ctx, Side.AI)
    (upgraded,) = ctx.ai.copies("jay")
    assert (upgraded.tier, upgraded.attack, upgraded.health, upgraded.max_health) == (3, 4, 10, 10)
    assert upgraded.health == upgraded.max_health
