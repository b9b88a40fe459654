from __future__ import annotations

import random

from stakepool.ledger.types import PositionSummary
from stakepool.runtime.errors import StakingError
from stakepool.runtime.queries import running_total_matches_scan, total_staked_amount

DAY = 86_400


def test_list_positions_partitions_by_state_in_id_order(make_pool, fund) -> None:
    pool, stk, _ = make_pool()
    fund(stk, "@alice", 3_000)
    for t in (0, 10, 20):
        pool.stake("@alice", 1_000, t)
    pool.claim("@alice", 1, DAY)
    pool.unstake("@alice", 1, 2 * DAY)
    pool.unstake("@alice", 0, 3 * DAY)

    listing = pool.list_positions("@alice")
    assert listing.active == [PositionSummary(id=2, start_time=20, end_time=0, total_rewards=0)]
    assert listing.inactive == [
        PositionSummary(id=0, start_time=0, end_time=3 * DAY, total_rewards=30),
        PositionSummary(id=1, start_time=10, end_time=2 * DAY, total_rewards=19),
    ]


def test_list_positions_for_unknown_participant_is_empty(make_pool) -> None:
    pool, _, _ = make_pool()
    listing = pool.list_positions("@nobody")
    assert listing.active == [] and listing.inactive == []
    assert listing.to_dict() == {"active": [], "inactive": []}


def test_totals_report(make_pool, fund) -> None:
    pool, stk, _ = make_pool()
    fund(stk, "@alice", 1_000)
    fund(stk, "@bob", 2_000)
    pool.stake("@alice", 1_000, 0)
    pool.stake("@bob", 2_000, 0)

    assert pool.totals(DAY) == {"now": DAY, "total_staked": 3_000, "total_active_reward": 30, "participants": 2}
    assert pool.accrued_reward_for_participant("@bob", DAY) == 20
    assert pool.total_active_reward(DAY) == 30


def test_total_staked_matches_active_positions_after_random_history(make_pool, fund) -> None:
    rng = random.Random(1234)
    pool, stk, _ = make_pool(min_staking_period=DAY)
    people = ["@a", "@b", "@c", "@d"]
    for p in people:
        fund(stk, p, 10**9)

    now = 0
    for _ in range(400):
        now += rng.randint(0, DAY)
        p = rng.choice(people)
        op = rng.random()
        try:
            if op < 0.5 or pool.position_count(p) == 0:
                pool.stake(p, rng.randint(1, 10_000), now)
            elif op < 0.75:
                pool.claim(p, rng.randrange(pool.position_count(p)), now)
            else:
                pool.unstake(p, rng.randrange(pool.position_count(p)), now)
        except StakingError:
            pass

        expected = sum(pos.amount for _p, _i, pos in pool.registry.iter_all() if pos.is_active)
        assert total_staked_amount(pool.registry) == expected
        assert running_total_matches_scan(pool.registry)

    for _p, _i, pos in pool.registry.iter_all():
        assert pos.last_claimed_time >= pos.start_time
