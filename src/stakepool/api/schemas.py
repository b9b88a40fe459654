from __future__ import annotations

"""Pydantic request schemas for the HTTP API.

Shape validation only. Business rules (zero amounts, timing, reserves) stay
in the pool so HTTP and in-process callers get the same errors.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class StakeRequest(BaseModel):
    participant: str = Field(..., min_length=1, description="Participant id, e.g. @alice")
    amount: int = Field(..., description="Stake units to deposit")
    now: Optional[int] = Field(default=None, description="Unix seconds; defaults to server time")

    model_config = {"extra": "forbid"}


class PositionRequest(BaseModel):
    participant: str = Field(..., min_length=1, description="Participant id, e.g. @alice")
    position_id: int = Field(..., ge=0, description="Sequential position id")
    now: Optional[int] = Field(default=None, description="Unix seconds; defaults to server time")

    model_config = {"extra": "forbid"}


ConfigField = Literal[
    "reward_ratio_numerator",
    "reward_ratio_denominator",
    "reward_interval",
    "min_staking_period",
    "max_staking_period",
    "stake_unit",
    "reward_unit",
]


class AdminConfigRequest(BaseModel):
    field: ConfigField
    value: Union[int, str]

    model_config = {"extra": "forbid"}


class AdminWithdrawRequest(BaseModel):
    amount: int = Field(..., description="Stake units to move from the pool to the owner")

    model_config = {"extra": "forbid"}
