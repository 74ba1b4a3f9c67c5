# src/oscilab/plot/trajectories.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from oscilab.runtime.portrait import PhasePortrait
from oscilab.runtime.session import TrajectorySession
from oscilab.runtime.trajectory import Trajectory
from oscilab.runtime.types import Variant
from oscilab.systems import get_system

__all__ = ["plot_trajectories", "plot_session", "plot_portrait", "savefig"]


def _line_kwargs(traj: Trajectory, defaults: dict[str, Any]) -> dict[str, Any]:
    kw = dict(defaults)
    if traj.color is not None:
        kw["color"] = traj.color
    if traj.line_width is not None:
        kw["linewidth"] = traj.line_width
    return kw


def _make_axes(three_d: bool, figsize: tuple[float, float]):
    fig = plt.figure(figsize=figsize)
    if three_d:
        return fig.add_subplot(111, projection="3d")
    return fig.add_subplot(111)


def plot_trajectories(
    trajectories: Sequence[Trajectory],
    *,
    ax=None,
    variant: Optional[Variant] = None,
    title: Optional[str] = None,
    figsize: tuple[float, float] = (6.0, 5.0),
    finite_only: bool = True,
    **line_kw: Any,
):
    """
    Draw trajectories in display order.

    Oscillator trajectories are drawn as 3D curves (x, y, z); averaged ones as
    curves in the (u1, u2) plane. Each trajectory's own color/line width wins
    over `line_kw`. With `finite_only`, diverged samples are skipped.

    Returns the Axes.
    """
    if variant is None:
        variant = trajectories[0].variant if trajectories else Variant.AVERAGED
    three_d = variant is Variant.OSCILLATOR
    if ax is None:
        ax = _make_axes(three_d, figsize)

    for traj in trajectories:
        if traj.variant is not variant:
            raise ValueError(
                f"cannot mix {traj.variant.value} and {variant.value} trajectories on one axes"
            )
        data = traj.samples
        if finite_only:
            data = data[:, traj.finite_mask()]
        kw = _line_kwargs(traj, line_kw)
        if three_d:
            ax.plot(data[0], data[1], data[2], **kw)
        else:
            ax.plot(data[0], data[1], **kw)

    names = trajectories[0].state_names if trajectories else None
    if three_d:
        names = names or ("x", "y", "z")
        ax.set_xlabel(names[0])
        ax.set_ylabel(names[1])
        ax.set_zlabel(names[2])
    else:
        names = names or ("u1", "u2")
        ax.set_xlabel(names[0])
        ax.set_ylabel(names[1])
        # Bounded systems get fixed limits; others autoscale.
        bounds = get_system(variant).bounds
        if names[0] in bounds:
            ax.set_xlim(*bounds[names[0]])
        if names[1] in bounds:
            ax.set_ylim(*bounds[names[1]])
        ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)
    return ax


def plot_session(session: TrajectorySession, *, ax=None, title: Optional[str] = None, **kw: Any):
    """Render every trajectory of `session`; titled with the system name by default."""
    return plot_trajectories(
        session.trajectories,
        ax=ax,
        variant=session.variant,
        title=title if title is not None else session.system.title,
        **kw,
    )


def plot_portrait(portrait: PhasePortrait, *, ax=None, title: Optional[str] = "Phase portrait", **kw: Any):
    """
    Render the last computed phase portrait. Every curve uses the portrait's
    color and line width; compute() must have been called first.
    """
    return plot_trajectories(
        portrait.trajectories,
        ax=ax,
        variant=portrait.variant,
        title=title,
        **kw,
    )


def savefig(fig_or_ax, path: str | Path, *, dpi: int = 150, fmts: Iterable[str] = ()) -> list[Path]:
    """
    Save a figure (or axes.figure) to `path`. Extra formats in `fmts` are
    written next to it with the same stem. Returns the written paths.
    """
    fig = fig_or_ax.figure if hasattr(fig_or_ax, "figure") and fig_or_ax.figure is not None else fig_or_ax
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    outputs = [target]
    for fmt in fmts:
        ext = "." + str(fmt).lower().lstrip(".")
        if ext != target.suffix.lower():
            outputs.append(target.with_suffix(ext))
    for out in outputs:
        fig.savefig(out, dpi=dpi, bbox_inches="tight")
    return outputs
