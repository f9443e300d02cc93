"""
Geometric computation on street geometries.
"""

from .intersection import IntersectionSolver
from .section import SectionExtractor

__all__ = [
    "IntersectionSolver",
    "SectionExtractor",
]
