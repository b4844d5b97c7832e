"""Attribute ranking engines used by Evaporative Cooling."""

from .base import ScoringEngine
from .main_effect import MainEffectConfig, MainEffectEngine
from .relieff import ReliefFConfig, ReliefFEngine

__all__ = [
    "ScoringEngine",
    "MainEffectConfig",
    "MainEffectEngine",
    "ReliefFConfig",
    "ReliefFEngine",
]
