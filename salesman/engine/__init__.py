"""
Genetic engine and population control.
"""

from .population import Population
from .genetic import EngineState, GenerationRecord, GeneticEngine, operation_count

__all__ = [
    "Population",
    "EngineState",
    "GenerationRecord",
    "GeneticEngine",
    "operation_count",
]
