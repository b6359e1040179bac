"""Gymnasium environment that puts a policy in the human seat."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from ..config import MAX_ROSTER_SIZE, REWARD_CHOICES, SHOP_SIZE, STARTING_HEALTH
from ..enums import Outcome, Phase, Rarity, Side
from ..game import GameState
from ..models import Unit
from ..player import ActorState
from ..shop import completes_triple, offer_cost

# Reward offers are inserted in front of the regular offers.
MAX_OFFER_SLOTS = SHOP_SIZE + 2
_OFFER_FEATURES = 7
_UNIT_FEATURES = 5
_CANDIDATE_FEATURES = 4
_ECONOMY_FEATURES = 6
_RARITY_SCALE = float(len(Rarity))


@dataclass
class RewardConfig:
    """Configurable reward shaping parameters."""

    buy_reward: float = 0.02
    merge_bonus: float = 0.25
    invalid_action_penalty: float = -0.1
    failed_action_penalty: float = -0.05
    health_swing_scale: float = 0.05
    round_win_bonus: float = 0.5
    round_loss_penalty: float = 0.5
    victory_bonus: float = 3.0
    defeat_penalty: float = 3.0


class AviaryEnv(gym.Env):
    """Single-agent environment over a player-versus-AI match."""

    metadata = {"render_modes": []}

    def __init__(
        self,
        *,
        reward_config: Optional[RewardConfig] = None,
        max_rounds: int = 50,
    ) -> None:
        super().__init__()
        self.reward_config = reward_config or RewardConfig()
        self.max_rounds = max_rounds
        self.game: Optional[GameState] = None

        obs_dim = (
            MAX_OFFER_SLOTS * _OFFER_FEATURES
            + MAX_ROSTER_SIZE * _UNIT_FEATURES
            + REWARD_CHOICES * _CANDIDATE_FEATURES
            + _ECONOMY_FEATURES
        )
        self.observation_space = spaces.Box(
            low=-np.inf, high=np.inf, shape=(obs_dim,), dtype=np.float32
        )

        self.buy_offset = 0
        self.pick_offset = self.buy_offset + MAX_OFFER_SLOTS
        self.end_shop_index = self.pick_offset + REWARD_CHOICES
        self.action_space = spaces.Discrete(self.end_shop_index + 1)

    # ------------------------------------------------------------------
    # Gym API
    # ------------------------------------------------------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = GameState(seed=game_seed)
        return self._build_observation(), self._info()

    def step(self, action: int):
        if self.game is None:
            raise RuntimeError("Environment has not been reset")

        reward = 0.0
        terminated = False
        truncated = False

        mask = self._action_mask()
        if not mask[action]:
            info = self._info()
            info["invalid_action"] = True
            return self._build_observation(), self.reward_config.invalid_action_penalty, False, False, info

        if action < self.pick_offset:
            reward += self._handle_buy(action - self.buy_offset)
        elif action < self.end_shop_index:
            reward += self._handle_pick(action - self.pick_offset)
        else:
            reward += self._handle_end_shop()

        if self.game.is_game_over():
            terminated = True
            reward += self._terminal_reward()
        elif self.game.round > self.max_rounds:
            truncated = True

        return self._build_observation(), float(reward), terminated, truncated, self._info()

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _handle_buy(self, offer_idx: int) -> float:
        success, _ = self.game.purchase(offer_idx)
        if not success:
            return self.reward_config.failed_action_penalty
        reward = self.reward_config.buy_reward
        if self.game.pending_reward is not None:
            reward += self.reward_config.merge_bonus
        return reward

    def _handle_pick(self, choice_idx: int) -> float:
        success, _ = self.game.pick_reward(choice_idx)
        if not success:
            return self.reward_config.failed_action_penalty
        return 0.0

    def _handle_end_shop(self) -> float:
        player, ai = self.game.player, self.game.ai
        prev_player_health = player.health
        prev_ai_health = ai.health

        success, _ = self.game.end_shop_phase()
        if not success:
            return self.reward_config.failed_action_penalty
        self.game.run_battle()

        swing = (prev_ai_health - ai.health) - (prev_player_health - player.health)
        reward = swing * self.reward_config.health_swing_scale
        result = self.game.ctx.last_battle
        if result is not None and result.winner is Side.PLAYER:
            reward += self.reward_config.round_win_bonus
        elif result is not None and result.winner is Side.AI:
            reward -= self.reward_config.round_loss_penalty
        return reward

    def _terminal_reward(self) -> float:
        if self.game.outcome is Outcome.PLAYER_WIN:
            return self.reward_config.victory_bonus
        if self.game.outcome is Outcome.AI_WIN:
            return -self.reward_config.defeat_penalty
        return 0.0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _info(self) -> Dict[str, object]:
        return {
            "action_mask": self._action_mask(),
            "round": self.game.round if self.game else 0,
            "outcome": self.game.outcome if self.game else None,
        }

    def _action_mask(self) -> np.ndarray:
        if self.game is None:
            return np.ones(self.action_space.n, dtype=np.int8)
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if self.game.is_game_over() or self.game.phase is not Phase.SHOP:
            return mask

        reward = self.game.pending_reward
        if reward is not None:
            for idx in range(len(reward.candidates)):
                mask[self.pick_offset + idx] = 1
            return mask

        player = self.game.player
        for idx, offer in enumerate(self.game.shop[:MAX_OFFER_SLOTS]):
            affordable = offer_cost(offer) <= player.currency
            fits = not player.roster_full() or completes_triple(player, offer)
            mask[self.buy_offset + idx] = 1 if (affordable and fits) else 0
        mask[self.end_shop_index] = 1
        return mask

    def _build_observation(self) -> np.ndarray:
        player, ai = self.game.player, self.game.ai

        features: List[float] = []
        for idx in range(MAX_OFFER_SLOTS):
            offer = self.game.shop[idx] if idx < len(self.game.shop) else None
            features.extend(self._encode_offer(offer, player))

        for idx in range(MAX_ROSTER_SIZE):
            unit = player.roster[idx] if idx < len(player.roster) else None
            features.extend(self._encode_unit(unit))

        reward = self.game.pending_reward
        candidates = reward.candidates if reward else []
        for idx in range(REWARD_CHOICES):
            unit = candidates[idx] if idx < len(candidates) else None
            features.extend(self._encode_candidate(unit))

        features.extend(self._encode_economy(player, ai))
        return np.asarray(features, dtype=np.float32)

    def _encode_offer(self, offer: Optional[Unit], player: ActorState) -> List[float]:
        if offer is None:
            return [0.0] * _OFFER_FEATURES
        return [
            1.0,
            offer.rarity.tier / _RARITY_SCALE,
            offer_cost(offer) / 4,
            offer.attack / 10,
            offer.health / 15,
            1.0 if offer.free_reward else 0.0,
            player.count_copies(offer.template_id) / 2,
        ]

    def _encode_unit(self, unit: Optional[Unit]) -> List[float]:
        if unit is None:
            return [0.0] * _UNIT_FEATURES
        return [
            unit.attack / 10,
            unit.health / 15,
            unit.max_health / 15,
            unit.tier / 3,
            unit.rarity.tier / _RARITY_SCALE,
        ]

    def _encode_candidate(self, unit: Optional[Unit]) -> List[float]:
        if unit is None:
            return [0.0] * _CANDIDATE_FEATURES
        return [1.0, unit.rarity.tier / _RARITY_SCALE, unit.attack / 10, unit.health / 15]

    def _encode_economy(self, player: ActorState, ai: ActorState) -> List[float]:
        return [
            player.health / STARTING_HEALTH,
            ai.health / STARTING_HEALTH,
            player.currency / 10,
            self.game.round / self.max_rounds,
            len(ai.roster) / MAX_ROSTER_SIZE,
            ai.attack_total() / 30,
        ]
