"""Policies that can drive :class:`AviaryEnv`."""
from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from ..agent import DraftAgent
from .env import AviaryEnv


class Policy:
    """Minimal interface: map an observation and its info dict to an action."""

    def __call__(self, obs: np.ndarray, info: Dict) -> int:
        raise NotImplementedError


class MaskedRandomPolicy(Policy):
    """Uniform choice among the legal actions."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def __call__(self, obs: np.ndarray, info: Dict) -> int:
        legal = np.flatnonzero(info["action_mask"])
        if legal.size == 0:
            raise RuntimeError("No legal action available")
        return int(self.rng.choice(legal))


class HeuristicPolicy(Policy):
    """Play the human seat with the draft heuristic's offer choice.

    Rewards are always taken from the first candidate and the shop phase ends
    once the preferred offer is no longer legal.
    """

    def __init__(self, env: AviaryEnv, agent: Optional[DraftAgent] = None) -> None:
        self.env = env
        self.agent = agent or DraftAgent()

    def __call__(self, obs: np.ndarray, info: Dict) -> int:
        mask = info["action_mask"]
        game = self.env.game
        if game is None:
            raise RuntimeError("Environment has not been reset")
        if game.pending_reward is not None:
            return self.env.pick_offset
        idx = self.agent.choose_offer(game.shop, game.player.currency)
        if idx is not None and self.env.buy_offset + idx < self.env.pick_offset:
            action = self.env.buy_offset + idx
            if mask[action]:
                return action
        return self.env.end_shop_index
