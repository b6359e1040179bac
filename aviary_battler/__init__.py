"""Public entrypoints for the Aviary Battler engine."""
from .agent import DraftAgent
from .catalog import DEFAULT_TEMPLATES, UnitCatalog
from .combat import BattleEngine
from .context import SimulationContext
from .enums import BattleState, Outcome, Phase, Rarity, Side
from .errors import EmptyRarityPool
from .game import GameState
from .merge import MergeResolver
from .models import AttackEvent, BattleResult, PendingReward, Unit, UnitTemplate
from .player import ActorState
from .training import EvaluationConfig, EvaluationReport, EvaluationSession
from .rl import AviaryEnv, RewardConfig

__all__ = [
    "ActorState",
    "AttackEvent",
    "AviaryEnv",
    "BattleEngine",
    "BattleResult",
    "BattleState",
    "DEFAULT_TEMPLATES",
    "DraftAgent",
    "EmptyRarityPool",
    "EvaluationConfig",
    "EvaluationReport",
    "EvaluationSession",
    "GameState",
    "MergeResolver",
    "Outcome",
    "PendingReward",
    "Phase",
    "Rarity",
    "RewardConfig",
    "Side",
    "SimulationContext",
    "Unit",
    "UnitCatalog",
    "UnitTemplate",
]
