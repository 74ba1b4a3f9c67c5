# src/oscilab/plot/__init__.py
from __future__ import annotations

from .trajectories import plot_trajectories, plot_session, plot_portrait, savefig

__all__ = ["plot_trajectories", "plot_session", "plot_portrait", "savefig"]
