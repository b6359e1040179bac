"""Training and evaluation utilities for Aviary Battler."""

from .env import AviaryEnv, RewardConfig
from .policies import HeuristicPolicy, MaskedRandomPolicy, Policy

__all__ = [
    "AviaryEnv",
    "RewardConfig",
    "Policy",
    "MaskedRandomPolicy",
    "HeuristicPolicy",
]
