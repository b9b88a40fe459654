from __future__ import annotations

"""Ledger Operations.

StakingPool owns the registry, the configuration store and the event log, and
is the only writer of all three. Every mutating call runs under one ledger-wide
ReentrancyGuard, held across the external transfer.

Per-position state machine:
  Active(opened) -> Active(claimed N times) -> Closed (terminal)

Validation order for every call:
  access / pause gate -> structure (id, amount) -> timing -> external sufficiency

All checks run before the first transfer; registry mutation and the event
happen only after the transfer reported success.
"""

import copy
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from stakepool.ledger.config import StakingConfig
from stakepool.ledger.constants import DEFAULT_POOL_ACCOUNT_ID
from stakepool.ledger.registry import PositionRegistry
from stakepool.ledger.rewards import accrued_reward, accrued_reward_for_participant, total_active_reward
from stakepool.ledger.token import TokenBackend, UnitRegistry
from stakepool.ledger.types import PositionListing, StakePosition
from stakepool.runtime import events as ev
from stakepool.runtime import metrics
from stakepool.runtime.access import OwnerGate
from stakepool.runtime.errors import (
    ClaimTooSoon,
    InactivePosition,
    InsufficientBalance,
    InsufficientPoolReserve,
    InvalidAmount,
    InvalidConfiguration,
    InvalidId,
    NotStaked,
    Paused,
    StakingError,
    TransferFailed,
    Unauthorized,
)
from stakepool.runtime.guard import ReentrancyGuard
from stakepool.runtime.pool_logging import log_event
from stakepool.runtime.queries import list_positions, pool_totals, total_staked_amount

Json = Dict[str, Any]

log = logging.getLogger("stakepool.pool")


def _as_amount(x: Any) -> int:
    if isinstance(x, bool) or not isinstance(x, int):
        raise InvalidAmount("amount_must_be_integer", {"amount": repr(x)})
    if x <= 0:
        raise InvalidAmount("amount_must_be_positive", {"amount": int(x)})
    return int(x)


def _as_participant(x: Any) -> str:
    p = x.strip() if isinstance(x, str) else ""
    if not p:
        raise Unauthorized("participant_required", {"participant": repr(x)})
    return p


def _as_time(x: Any) -> int:
    if isinstance(x, bool) or not isinstance(x, int) or x < 0:
        raise InvalidAmount("time_must_be_non_negative_integer", {"now": repr(x)})
    return int(x)


class StakingPool:
    def __init__(
        self,
        *,
        owner: str,
        units: UnitRegistry,
        config: Optional[StakingConfig] = None,
        pool_account: str = DEFAULT_POOL_ACCOUNT_ID,
        registry: Optional[PositionRegistry] = None,
        event_log: Optional[ev.EventLog] = None,
    ) -> None:
        self._gate = OwnerGate(owner)
        self._units = units
        self._config = config if config is not None else StakingConfig()
        for field in ("stake_unit", "reward_unit"):
            handle = getattr(self._config, field)
            if handle not in self._units:
                raise InvalidConfiguration("unknown_unit", {"field": field, "unit": handle})

        self.pool_account = str(pool_account)
        self._registry = registry if registry is not None else PositionRegistry()
        self._events = event_log if event_log is not None else ev.EventLog()
        self._guard = ReentrancyGuard()
        self._paused = False

    # ----------------------------
    # Accessors
    # ----------------------------

    @property
    def owner(self) -> str:
        return self._gate.owner

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def config(self) -> StakingConfig:
        """A copy; mutate only through the owner-gated setters."""
        return copy.copy(self._config)

    @property
    def registry(self) -> PositionRegistry:
        return self._registry

    @property
    def events(self) -> ev.EventLog:
        return self._events

    @property
    def stake_token(self) -> TokenBackend:
        return self._units.get(self._config.stake_unit)

    @property
    def reward_token(self) -> TokenBackend:
        return self._units.get(self._config.reward_unit)

    # ----------------------------
    # Internals
    # ----------------------------

    @contextmanager
    def _operation(self, op: str) -> Iterator[None]:
        try:
            with self._guard.hold(op):
                yield
        except StakingError as e:
            metrics.inc_counter(f"{op}_rejected")
            log_event(log, f"{op}_rejected", level=logging.DEBUG, code=e.code, reason=e.reason)
            raise

    def _require_not_paused(self) -> None:
        if self._paused:
            raise Paused("pool_paused", {})

    def _require_position(self, participant: str, position_id: Any) -> StakePosition:
        if not self._registry.has_positions(participant):
            raise NotStaked("no_positions", {"participant": participant})
        pos = self._registry.get(participant, position_id)
        if pos is None:
            raise InvalidId("position_not_found", {"participant": participant, "position_id": position_id})
        if not pos.is_active:
            raise InactivePosition("position_closed", {"participant": participant, "position_id": position_id})
        return pos

    def _pay(self, token: TokenBackend, to: str, amount: int) -> None:
        if amount <= 0:
            return
        if not token.transfer(self.pool_account, to, amount):
            raise TransferFailed("transfer_rejected", {"to": to, "amount": int(amount)})

    def _refresh_gauges(self) -> None:
        metrics.set_gauge("total_staked", self._registry.active_amount)

    # ----------------------------
    # Ledger operations
    # ----------------------------

    def stake(self, participant: str, amount: int, now: int) -> int:
        """Deposit `amount` stake units and open a new position. Returns the position id."""
        with self._operation("stake"):
            self._require_not_paused()
            p = _as_participant(participant)
            amt = _as_amount(amount)
            t = _as_time(now)

            token = self.stake_token
            balance = int(token.balance_of(p))
            if balance < amt:
                raise InsufficientBalance("stake_unit_balance_too_low", {"balance": balance, "amount": amt})

            if not token.transfer_from(self.pool_account, p, self.pool_account, amt):
                raise TransferFailed("deposit_rejected", {"participant": p, "amount": amt})

            pid = self._registry.allocate(p, amt, t)
            self._events.emit(ev.STAKED, participant=p, amount=amt)

        metrics.inc_counter("stake_ok")
        self._refresh_gauges()
        log_event(log, "staked", participant=p, position_id=pid, amount=amt, now=t)
        return pid

    def claim(self, participant: str, position_id: int, now: int) -> int:
        """Pay out accrued reward without closing the position. Returns the reward paid."""
        with self._operation("claim"):
            self._require_not_paused()
            p = _as_participant(participant)
            pos = self._require_position(p, position_id)
            t = _as_time(now)

            # gated from the last claim, not from start_time
            ready_at = int(pos.last_claimed_time) + int(self._config.min_staking_period)
            if t < ready_at:
                raise ClaimTooSoon("min_staking_period_not_elapsed", {"ready_at": ready_at, "now": t})

            reward = accrued_reward(pos, self._config, t)
            token = self.reward_token
            reserve = int(token.balance_of(self.pool_account))
            if reserve < reward:
                raise InsufficientPoolReserve("reward_reserve_too_low", {"reserve": reserve, "reward": reward})

            self._pay(token, p, reward)
            self._registry.credit_rewards(p, position_id, reward, t)
            self._events.emit(ev.CLAIMED, participant=p, amount=reward)

        metrics.inc_counter("claim_ok")
        log_event(log, "claimed", participant=p, position_id=int(position_id), reward=reward, now=t)
        return reward

    def unstake(self, participant: str, position_id: int, now: int) -> int:
        """Close the position, returning principal plus any final reward. Returns the payout.

        Exiting before min_staking_period (measured from start_time) forfeits
        the accrued reward; only principal is returned.
        """
        with self._operation("unstake"):
            self._require_not_paused()
            p = _as_participant(participant)
            pos = self._require_position(p, position_id)
            t = _as_time(now)

            principal = int(pos.amount)
            held_long_enough = t >= int(pos.start_time) + int(self._config.min_staking_period)
            reward = accrued_reward(pos, self._config, t) if held_long_enough else 0
            payout = principal + reward

            token = self.stake_token
            reserve = int(token.balance_of(self.pool_account))
            if reserve < payout:
                raise InsufficientPoolReserve("stake_reserve_too_low", {"reserve": reserve, "payout": payout})

            self._pay(token, p, payout)
            if held_long_enough:
                self._registry.credit_rewards(p, position_id, reward, t)
            self._registry.mark_closed(p, position_id, t)
            # notification carries principal only, even when a reward was paid
            self._events.emit(ev.UNSTAKED, participant=p, amount=principal)

        metrics.inc_counter("unstake_ok")
        self._refresh_gauges()
        log_event(
            log,
            "unstaked",
            participant=p,
            position_id=int(position_id),
            principal=principal,
            reward=reward,
            forfeited=not held_long_enough,
            now=t,
        )
        return payout

    # ----------------------------
    # Administration (owner only)
    # ----------------------------

    def admin_withdraw(self, caller: str, amount: int) -> int:
        """Move stake units from the pool to the owner.

        No check against outstanding principal or rewards: the owner is trusted.
        Not blocked by pause.
        """
        with self._operation("admin_withdraw"):
            self._gate.require_owner(caller)
            amt = _as_amount(amount)
            self._pay(self.stake_token, self.owner, amt)
            self._events.emit(ev.ADMIN_WITHDRAWN, owner=self.owner, amount=amt)

        log_event(log, "admin_withdraw", owner=self.owner, amount=amt, level=logging.WARNING)
        return amt

    def pause(self, caller: str) -> bool:
        """Block stake/claim/unstake. Returns False if already paused."""
        with self._operation("pause"):
            self._gate.require_owner(caller)
            if self._paused:
                return False
            self._paused = True
            self._events.emit(ev.PAUSED, owner=self.owner)
        log_event(log, "paused", owner=self.owner, level=logging.WARNING)
        return True

    def unpause(self, caller: str) -> bool:
        with self._operation("unpause"):
            self._gate.require_owner(caller)
            if not self._paused:
                return False
            self._paused = False
            self._events.emit(ev.UNPAUSED, owner=self.owner)
        log_event(log, "unpaused", owner=self.owner)
        return True

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        with self._operation("transfer_ownership"):
            prev = self._gate.transfer_ownership(caller, new_owner)
            self._events.emit(ev.OWNERSHIP_TRANSFERRED, previous=prev, new=self.owner)
        log_event(log, "ownership_transferred", previous=prev, new=self.owner, level=logging.WARNING)
        return prev

    def _set_config(self, caller: str, field: str, value: Any) -> Any:
        with self._operation("set_config"):
            self._gate.require_owner(caller)
            if field in ("stake_unit", "reward_unit") and isinstance(value, str) and value.strip():
                if value.strip() not in self._units:
                    raise InvalidConfiguration("unknown_unit", {"field": field, "unit": value})
            stored = self._config.set_field(field, value)
            self._events.emit(ev.CONFIG_CHANGED, field=field, value=stored)
        log_event(log, "config_changed", field=field, value=stored)
        return stored

    def set_reward_interval(self, caller: str, value: int) -> int:
        return self._set_config(caller, "reward_interval", value)

    def set_reward_ratio_numerator(self, caller: str, value: int) -> int:
        return self._set_config(caller, "reward_ratio_numerator", value)

    def set_reward_ratio_denominator(self, caller: str, value: int) -> int:
        return self._set_config(caller, "reward_ratio_denominator", value)

    def set_min_staking_period(self, caller: str, value: int) -> int:
        return self._set_config(caller, "min_staking_period", value)

    def set_max_staking_period(self, caller: str, value: int) -> int:
        return self._set_config(caller, "max_staking_period", value)

    def set_stake_unit(self, caller: str, handle: str) -> str:
        return self._set_config(caller, "stake_unit", handle)

    def set_reward_unit(self, caller: str, handle: str) -> str:
        return self._set_config(caller, "reward_unit", handle)

    # ----------------------------
    # Reads
    # ----------------------------

    def get_position(self, participant: str, position_id: int) -> Optional[StakePosition]:
        pos = self._registry.get(participant, position_id)
        return copy.copy(pos) if pos is not None else None

    def position_count(self, participant: str) -> int:
        return self._registry.position_count(participant)

    def accrued_reward(self, participant: str, position_id: int, now: int) -> int:
        return accrued_reward(self._registry.get(participant, position_id), self._config, now)

    def accrued_reward_for_participant(self, participant: str, now: int) -> int:
        return accrued_reward_for_participant(self._registry, participant, self._config, now)

    def total_active_reward(self, now: int) -> int:
        return total_active_reward(self._registry, self._config, now)

    def total_staked_amount(self) -> int:
        return total_staked_amount(self._registry)

    def list_positions(self, participant: str) -> PositionListing:
        return list_positions(self._registry, participant)

    def totals(self, now: int) -> Json:
        return pool_totals(self._registry, self._config, now)


__all__ = ["StakingPool"]
