"""
Demo: evolve a tour over random points and save snapshots of the best path.
Drives the engine stepwise, the way a host render loop would.
"""
import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path.cwd()))

from salesman.config import build_settings
from salesman.engine.genetic import EngineState, GeneticEngine
from salesman.utils.logger import setup_logging
from salesman.utils.visualization import TourSnapshotRenderer, plot_tour


def run_demo():
    print("🧭 Running tour demo")

    output_dir = Path("salesman_runs") / "demo"
    setup_logging(run_dir=output_dir / "logs", level=logging.INFO)
    logger = logging.getLogger("salesman.demo")

    settings = build_settings(points_count=25, population_max=200, generations=80, seed=42)
    engine = GeneticEngine(settings).init()
    engine.renderer = TourSnapshotRenderer(engine.environment, output_dir / "frames", every=20)

    engine.start()
    while engine.step() is EngineState.RUNNING:
        if engine.generation % 10 == 0:
            logger.info(f"   generation {engine.generation}: best={engine.loss_history[-1]:.2f}")

    best = engine.best_path
    plot_tour(engine.environment, best.point_index, output_dir / "best.png")
    engine.history_frame().to_csv(output_dir / "history.csv", index=False)

    print(f"   ✅ Best tour length {best.score:.2f} after {engine.generation} generations")
    print(f"   Outputs in {output_dir}")


if __name__ == "__main__":
    run_demo()
