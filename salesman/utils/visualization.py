"""
Visualization utilities for salesman.
"""
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional, Sequence
import logging

from salesman.model.environment import Environment

logger = logging.getLogger(__name__)


def plot_tour(
    env: Environment,
    point_index: Sequence[int],
    output_file: Path,
    title: Optional[str] = None,
) -> bool:
    """
    Plot a closed tour in 3D and save it to file.

    Args:
        env: Environment the indices refer to
        point_index: Visiting order
        output_file: Path to save .png image
        title: Optional plot title

    Returns:
        True if the image was written.
    """
    try:
        tour = env.tour_coordinates(point_index)
        coords = env.coordinates

        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(projection='3d')

        ax.plot(tour[:, 0], tour[:, 1], tour[:, 2], color='#333333', linewidth=0.9, linestyle='--')
        ax.scatter(coords[:, 0], coords[:, 1], coords[:, 2], color='#1e88e5', s=18)
        ax.scatter([env.start.x], [env.start.y], [env.start.z], color='#e53935', s=40)

        length = env.tour_length(point_index)
        ax.set_title(title or f"Tour length: {length:.2f}")

        fig.savefig(output_file, dpi=150, bbox_inches='tight', pad_inches=0.1)
        plt.close(fig)

        logger.debug(f"Saved tour plot to {output_file}")
        return True

    except (OSError, ValueError, IndexError) as e:
        logger.error(f"Failed to plot tour: {e}")
        return False


class TourSnapshotRenderer:
    """Render callback that saves a tour plot every ``every`` generations."""

    def __init__(self, env: Environment, output_dir: Path, every: int = 10):
        self.env = env
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.every = max(1, int(every))
        self.calls = 0
        self.saved = []

    def __call__(self, point_index: Sequence[int]):
        if self.calls % self.every == 0:
            output_file = self.output_dir / f"tour_{self.calls:05d}.png"
            if plot_tour(self.env, point_index, output_file, title=f"Generation {self.calls + 1}"):
                self.saved.append(output_file)
        self.calls += 1
