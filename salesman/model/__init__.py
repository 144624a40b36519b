"""
Point, environment and path model.
"""

from .environment import Environment, Point, generate_points
from .path import INVALID_PATH_SCORE, Path

__all__ = [
    "Environment",
    "Point",
    "generate_points",
    "Path",
    "INVALID_PATH_SCORE",
]
