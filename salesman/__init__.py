"""
salesman: Approximate Euclidean travelling-salesman tours with a genetic algorithm.

salesman evolves a population of visiting orders over a fixed set of 3D points
toward shorter closed tours anchored at a start location. The engine can run
to completion in one call or be stepped one generation at a time by a host
application with its own render loop.
"""

__version__ = "0.1.0"

VERSION_TEXT = (
    f"salesman {__version__}\n"
    "Approximate Euclidean travelling-salesman tours with a genetic algorithm.\n"
)

from salesman.config import SalesmanSettings, build_settings, get_run_defaults
from salesman.exceptions import ConfigurationError, EvolutionError, SalesmanError
from salesman.model.environment import Environment, Point
from salesman.model.path import INVALID_PATH_SCORE, Path
from salesman.engine.population import Population
from salesman.engine.genetic import EngineState, GenerationRecord, GeneticEngine

__all__ = [
    "SalesmanSettings",
    "build_settings",
    "get_run_defaults",
    "SalesmanError",
    "ConfigurationError",
    "EvolutionError",
    "Environment",
    "Point",
    "Path",
    "INVALID_PATH_SCORE",
    "Population",
    "EngineState",
    "GenerationRecord",
    "GeneticEngine",
]
