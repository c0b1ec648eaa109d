"""Localization algorithms: Monte Carlo Localization (motion update)."""

from .mcl import Mcl, Particle

__all__ = ["Mcl", "Particle"]
