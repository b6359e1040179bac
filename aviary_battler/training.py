"""High level helpers for evaluating policies in the human seat."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

from tqdm import trange

from .enums import Outcome
from .metrics import EpisodeStats
from .rl import AviaryEnv, MaskedRandomPolicy, Policy, RewardConfig


@dataclass
class EvaluationConfig:
    """Parameters that control an evaluation run."""

    episodes: int = 10
    max_steps_per_episode: int = 2_000
    seed: Optional[int] = None


@dataclass
class EvaluationReport:
    """Summary statistics returned after an evaluation run."""

    config: EvaluationConfig
    mean_return: float
    mean_length: float
    mean_rounds: float
    win_rate: float
    loss_rate: float
    draw_rate: float
    history: list[float] = field(default_factory=list)


class EvaluationSession:
    """Plays whole matches with a policy and aggregates the results."""

    def __init__(
        self,
        *,
        config: Optional[EvaluationConfig] = None,
        reward_config: Optional[RewardConfig] = None,
        policy_factory: Optional[Callable[[AviaryEnv], Policy]] = None,
        env_kwargs: Optional[Dict] = None,
    ) -> None:
        self.config = config or EvaluationConfig()
        self.env = AviaryEnv(reward_config=reward_config, **dict(env_kwargs or {}))
        if policy_factory is None:
            self.policy: Policy = MaskedRandomPolicy(self.config.seed)
        else:
            self.policy = policy_factory(self.env)

    def evaluate(self, episodes: Optional[int] = None, *, progress_bar: bool = True) -> EvaluationReport:
        total = episodes or self.config.episodes
        stats = EpisodeStats()

        iterator: Iterable[int] = trange(total, desc="Evaluating") if progress_bar else range(total)
        for episode in iterator:
            seed = None if self.config.seed is None else self.config.seed + episode
            obs, info = self.env.reset(seed=seed)
            episode_return = 0.0
            length = 0
            done = False
            while not done and length < self.config.max_steps_per_episode:
                action = self.policy(obs, info)
                obs, reward, terminated, truncated, info = self.env.step(action)
                episode_return += reward
                length += 1
                done = terminated or truncated
            outcome: Optional[Outcome] = info.get("outcome")
            stats.record(episode_return, length, info.get("round", 0), outcome)

        summary = stats.to_dict()
        return EvaluationReport(
            config=self.config,
            mean_return=summary["mean_return"],
            mean_length=summary["mean_length"],
            mean_rounds=summary["mean_rounds"],
            win_rate=summary["win_rate"],
            loss_rate=summary["loss_rate"],
            draw_rate=summary["draw_rate"],
            history=list(stats.returns),
        )
