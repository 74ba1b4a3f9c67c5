# src/oscilab/cli.py
"""
Command line front end.

    oscilab [--config FILE] run --variant averaged --method rk4 --chain 3 --out run.npz
    oscilab portrait --x-step 0.5 --y-step 0.1 --plot portrait.png
    oscilab methods
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

import numpy as np

from oscilab.config import load_config
from oscilab.errors import OscilabError
from oscilab.runtime.portrait import MAX_POINTS, PhasePortrait
from oscilab.runtime.types import Method, Variant
from oscilab.steppers import registry as stepper_registry

__all__ = ["main", "build_parser"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oscilab", description="Explore oscillator trajectories.")
    parser.add_argument("--config", default=None, help="TOML config file (default: $OSCILAB_CONFIG)")
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="compute chained trajectories")
    run_p.add_argument("--variant", default="oscillator", help="oscillator | averaged")
    run_p.add_argument("--method", default=None, help="euler | rk4 | adams")
    run_p.add_argument("--eps", type=float, default=None)
    run_p.add_argument("--alpha", type=float, default=None)
    run_p.add_argument("--beta", type=float, default=None)
    run_p.add_argument("--dt", type=float, default=None, help="signed step; negative integrates backwards")
    run_p.add_argument("--int-time", dest="int_time", type=float, default=None)
    run_p.add_argument("--steps", dest="step_count", type=int, default=None)
    run_p.add_argument("--ic", type=float, nargs="+", default=None, help="initial state components")
    run_p.add_argument("--chain", type=int, default=1, help="number of chained trajectories")
    run_p.add_argument("--color", default=None)
    run_p.add_argument("--line-width", dest="line_width", type=float, default=None)
    run_p.add_argument("--jit", action="store_true", help="compile the integration kernels with numba")
    run_p.add_argument("--out", default=None, help="write samples to an .npz file")
    run_p.add_argument("--plot", default=None, help="write a figure (png, pdf, svg)")

    por_p = sub.add_parser("portrait", help="phase portrait of the averaged system")
    por_p.add_argument("--method", default="euler", help="euler | rk4 | adams")
    por_p.add_argument("--eps", type=float, default=None)
    por_p.add_argument("--alpha", type=float, default=None)
    por_p.add_argument("--beta", type=float, default=None)
    por_p.add_argument("--dt", type=float, default=None)
    por_p.add_argument("--steps", dest="step_count", type=int, default=None)
    por_p.add_argument("--x-step", dest="x_step", type=float, default=0.5, help="grid spacing along u1")
    por_p.add_argument("--y-step", dest="y_step", type=float, default=0.1, help="grid spacing along u2")
    por_p.add_argument("--max-points", dest="max_points", type=int, default=MAX_POINTS)
    por_p.add_argument("--color", default=None)
    por_p.add_argument("--jit", action="store_true", help="compile the integration kernels with numba")
    por_p.add_argument("--out", default=None, help="write samples to an .npz file")
    por_p.add_argument("--plot", default=None, help="write a figure (png, pdf, svg)")

    sub.add_parser("methods", help="list integration methods")
    return parser


def _cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    session = config.make_session(Variant.parse(args.variant), jit=args.jit)
    if args.method is not None:
        session.set_method(args.method)
    updates = {
        key: getattr(args, key)
        for key in ("eps", "alpha", "beta", "dt", "int_time", "step_count")
        if getattr(args, key) is not None
    }
    if updates:
        session.update_parameters(updates)
    if args.ic is not None:
        session.set_initial_state(args.ic)
    session.set_display(color=args.color, line_width=args.line_width)
    if args.chain < 1:
        print("error: --chain must be >= 1", file=sys.stderr)
        return 1

    for _ in range(args.chain):
        session.add_trajectory()

    for i, traj in enumerate(session.trajectories):
        end = ", ".join(f"{n}={v:.6g}" for n, v in zip(traj.state_names, traj.last))
        flag = " (diverged)" if traj.diverged else ""
        print(f"[{i}] {traj.method.value} samples={len(traj)} end: {end}{flag}")

    if args.out:
        arrays = {f"traj{i}": t.samples for i, t in enumerate(session.trajectories)}
        np.savez(args.out, state_names=np.array(session.system.state_names), **arrays)
        print(f"Wrote {args.out}")
    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from oscilab.plot import plot_session, savefig

        ax = plot_session(session)
        savefig(ax, args.plot)
        print(f"Wrote {args.plot}")
    return 0


def _cmd_portrait(args: argparse.Namespace) -> int:
    portrait = PhasePortrait(
        method=args.method,
        x_step=args.x_step,
        y_step=args.y_step,
        max_points=args.max_points,
        jit=args.jit,
    )
    for key in ("eps", "alpha", "beta", "dt", "step_count"):
        value = getattr(args, key)
        if value is not None:
            portrait.update_parameter(key, value)
    if args.color is not None:
        portrait.color = args.color

    n_points = len(portrait.grid())
    trajectories = portrait.compute()
    print(f"portrait: {len(trajectories)} trajectories from {n_points} grid points")

    if args.out:
        arrays = {f"traj{i}": t.samples for i, t in enumerate(trajectories)}
        np.savez(args.out, initial=np.array([t.samples[:, 0] for t in trajectories]), **arrays)
        print(f"Wrote {args.out}")
    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from oscilab.plot import plot_portrait, savefig

        ax = plot_portrait(portrait)
        savefig(ax, args.plot)
        print(f"Wrote {args.plot}")
    return 0

def _cmd_methods(args: argparse.Namespace) -> int:
    for method, spec in stepper_registry().items():
        meta = spec.meta
        aliases = ", ".join(meta.aliases) or "-"
        print(
            f"{method.value:<6} family={meta.family} order={meta.order} "
            f"stages={meta.stages} multistep={meta.multistep} aliases={aliases}"
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handlers = {"run": _cmd_run, "portrait": _cmd_portrait, "methods": _cmd_methods}
    try:
        return handlers[args.command](args)
    except OscilabError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
