"""
Genetic engine for the travelling-salesman problem.

Generation pipeline (one ``step()``):
- Sort the population best-first
- Honour a pending stop request or an exhausted generation budget
- Trim back to ``population_max`` (offspring of the previous step pile up)
- Hand the best path to the renderer
- Crossover between rank-weighted parents (two offspring per pairing)
- Swap mutation of uniformly picked members

The blocking ``run()`` and the stepwise ``start()``/``step()`` pair share the
same ``step()``, so a host with its own scheduling (UI timer, task queue) gets
exactly the same evolution as a plain loop.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd
from deap import tools
from tqdm import tqdm

from salesman.config import SalesmanSettings, build_settings
from salesman.exceptions import ConfigurationError, EvolutionError
from salesman.engine.population import Population
from salesman.model.environment import Environment
from salesman.model.path import Path
from salesman.utils.random import make_rng, pick_index, roll

logger = logging.getLogger(__name__)

RenderCallback = Callable[[Tuple[int, ...]], None]


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"


@dataclass(frozen=True)
class GenerationRecord:
    """Summary of one completed generation."""

    generation: int
    best_score: float
    best_index: Tuple[int, ...]
    mean_score: float
    population_size: int
    crossovers: int
    mutations: int


def operation_count(frequency: float, population_size: int) -> int:
    """Number of crossovers/mutations for a frequency over a population."""
    return int(math.ceil(round(frequency * population_size, 9)))


class GeneticEngine:
    """Seeded genetic algorithm over visiting orders with cooperative cancellation."""

    def __init__(
        self,
        settings: Optional[Union[SalesmanSettings, Mapping[str, Any]]] = None,
        renderer: Optional[RenderCallback] = None,
        rng: Optional[np.random.RandomState] = None,
        environment: Optional[Environment] = None,
    ):
        """
        Initialize engine.

        Args:
            settings: Run settings, or a mapping of overrides for ``build_settings``.
                      Kept by reference so a host may change it between runs.
            renderer: Optional callback receiving the best point-index sequence
                      once per generation
            rng: Random source (defaults to one seeded from ``settings.seed``)
            environment: Pre-built environment (must match ``points_count``)

        Raises:
            ConfigurationError: on invalid settings or a mismatched environment.
        """
        if settings is None:
            settings = build_settings()
        elif isinstance(settings, Mapping):
            settings = build_settings(**settings)

        self.settings: SalesmanSettings = settings
        self._run_settings = self._snapshot_settings()

        if environment is not None and len(environment) != self._run_settings.points_count:
            raise ConfigurationError(
                f"Environment has {len(environment)} points but points_count="
                f"{self._run_settings.points_count}"
            )

        self.renderer = renderer
        self.rng = rng if rng is not None else make_rng(self._run_settings.seed)

        self._environment: Optional[Environment] = environment
        self._generated_scale: Optional[float] = None
        self._population: Optional[Population] = None
        self._state = EngineState.IDLE
        self._stop_requested = False
        self._generation = 0
        self._remaining = 0
        self._last_record: Optional[GenerationRecord] = None

        self.loss_history: List[float] = []
        self.generation_records: List[GenerationRecord] = []
        self._setup_statistics()

    def _snapshot_settings(self) -> SalesmanSettings:
        """Validated copy of the current settings, frozen for one run."""
        return build_settings(**self.settings.model_dump())

    def _setup_statistics(self):
        """Setup DEAP statistics and logbook."""
        self.stats = tools.Statistics(key=attrgetter("score"))
        self.stats.register("min", np.min)
        self.stats.register("avg", np.mean)
        self.stats.register("std", np.std)
        self.logbook = tools.Logbook()
        self.logbook.header = ["gen", "size", "crossovers", "mutations", "min", "avg", "std"]

    # ==================== Properties ====================

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def generation(self) -> int:
        """Number of completed generations in the current run."""
        return self._generation

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    @property
    def population(self) -> Optional[Population]:
        return self._population

    @property
    def best_path(self) -> Path:
        if self._population is None or len(self._population) == 0:
            raise EvolutionError("Engine has no population; call init() or start() first")
        return self._population.best

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    # ==================== Control surface ====================

    def init(self):
        """Build the environment if missing and seed a fresh population."""
        self._run_settings = self._snapshot_settings()
        if self._needs_new_environment():
            self._build_environment()
        self._seed_population()
        self._state = EngineState.IDLE
        return self

    def reset(self):
        """Regenerate the environment with fresh random points and reseed."""
        self._run_settings = self._snapshot_settings()
        self._build_environment()
        self._seed_population()
        self._state = EngineState.IDLE
        return self

    def start(self, generations: Optional[int] = None):
        """
        Begin a run of ``generations`` (default ``settings.generations``).

        The population is reseeded, as every run evolves from random orders.
        """
        if generations is not None and generations < 0:
            raise ConfigurationError(f"generations must be >= 0, got {generations}")
        if self._state is EngineState.RUNNING:
            logger.info("Restarting a run that was still in progress")

        self.init()
        self._stop_requested = False
        self._remaining = self._run_settings.generations if generations is None else generations
        self._state = EngineState.RUNNING

        s = self._run_settings
        logger.info(
            f"Starting GA run (points={s.points_count}, pop={s.population_max}, "
            f"gen={self._remaining}, cross={s.cross_frequency:.2f}, mut={s.mutation_frequency:.2f})"
        )
        return self

    def stop(self):
        """Request cancellation; honoured at the start of the next ``step()``."""
        self._stop_requested = True
        logger.debug("Stop requested")

    def step(self) -> EngineState:
        """
        Execute one generation.

        Returns:
            Engine state after the step. ``RUNNING`` means another call will
            evolve a further generation.

        Raises:
            EvolutionError: if no run is in progress.
        """
        if self._state is not EngineState.RUNNING:
            raise EvolutionError(f"Cannot step an engine in state '{self._state.value}'; call start() first")

        population = self._population
        s = self._run_settings

        # Ascending order, best path first.
        population.sort()

        if self._stop_requested:
            self._state = EngineState.STOPPED
            logger.info(
                f"🛑 Run stopped after {self._generation} generations: best={population[0].score:.2f}"
            )
            return self._state

        if self._remaining <= 0:
            self._state = EngineState.COMPLETED
            logger.info(
                f"GA complete after {self._generation} generations: best={population[0].score:.2f}"
            )
            return self._state

        population.trim(s.population_max)
        self._emit(population[0])

        # Crossover. Parents are always drawn from the trimmed, ranked population.
        ranked_size = len(population)
        crossovers = operation_count(s.cross_frequency, ranked_size)
        for _ in range(crossovers):
            parent_a = roll(s.weights, ranked_size, self.rng)
            parent_b = roll(s.weights, ranked_size, self.rng, exclude_index=parent_a)
            population.append(population[parent_a].breed(population[parent_b], self.rng))
            population.append(population[parent_b].breed(population[parent_a], self.rng))

        # Mutation
        size_before_mutations = len(population)
        mutations = operation_count(s.mutation_frequency, size_before_mutations)
        for _ in range(mutations):
            source = population[pick_index(size_before_mutations, self.rng)]
            population.append(source.mutate(rng=self.rng))

        self._generation += 1
        self._remaining -= 1
        self._record(crossovers, mutations)
        return self._state

    def run(self, generations: Optional[int] = None, progress: bool = False) -> Path:
        """
        Blocking run: evolve until the budget is spent or ``stop()`` is called.

        Args:
            generations: Generation budget (default ``settings.generations``)
            progress: Show a tqdm progress bar

        Returns:
            Best path found.
        """
        self.start(generations)
        with tqdm(total=self._remaining, desc="  Evolving", leave=False, disable=not progress) as bar:
            while self.step() is EngineState.RUNNING:
                bar.update(1)
        return self.best_path

    def generate(self, generations: Optional[int] = None, progress: bool = False) -> Path:
        """Alias for ``run()``."""
        return self.run(generations, progress=progress)

    def iter_generations(self, generations: Optional[int] = None) -> Iterator[GenerationRecord]:
        """
        Stepwise run as a generator.

        Yields a record after every completed generation; ``stop()`` may be
        called between iterations to end the run early.
        """
        self.start(generations)
        while self.step() is EngineState.RUNNING:
            yield self._last_record

    # ==================== Internals ====================

    def _needs_new_environment(self) -> bool:
        s = self._run_settings
        if self._environment is None or len(self._environment) != s.points_count:
            return True
        return self._generated_scale is not None and self._generated_scale != s.distance_scale

    def _build_environment(self):
        s = self._run_settings
        self._environment = Environment.generate(s.points_count, s.distance_scale, self.rng)
        self._generated_scale = s.distance_scale
        logger.debug(f"Built {self._environment!r}")

    def _seed_population(self):
        s = self._run_settings
        self._population = Population.random(self._environment, s.population_max, self.rng)
        self._generation = 0
        self._remaining = 0
        self._last_record = None
        self.loss_history = []
        self.generation_records = []
        self._setup_statistics()
        self._record(0, 0)
        logger.debug(f"Seeded {len(self._population)} random paths")

    def _emit(self, best: Path):
        if self.renderer is None:
            return
        try:
            self.renderer(best.point_index)
        except Exception as e:
            logger.warning("Renderer failed at gen %s: %s", self._generation + 1, e)

    def _record(self, crossovers: int, mutations: int):
        """Append statistics for the population as it stands now."""
        population = self._population
        best = population.best
        record = self.stats.compile(population)
        self.logbook.record(
            gen=self._generation,
            size=len(population),
            crossovers=crossovers,
            mutations=mutations,
            **record,
        )
        self._last_record = GenerationRecord(
            generation=self._generation,
            best_score=float(best.score),
            best_index=best.point_index,
            mean_score=float(record["avg"]),
            population_size=len(population),
            crossovers=crossovers,
            mutations=mutations,
        )
        self.loss_history.append(float(best.score))
        self.generation_records.append(self._last_record)

        if self._generation > 0:
            logger.info(
                f"Gen {self._generation}: best={best.score:.2f}, mean={record['avg']:.2f}, "
                f"size={len(population)} (+{2 * crossovers} bred, +{mutations} mutated)"
            )

    def history_frame(self) -> pd.DataFrame:
        """Per-generation statistics as a DataFrame (generation 0 = seed population)."""
        return pd.DataFrame(list(self.logbook))
