import json
import logging
from pathlib import Path
import numpy as np
import importlib
import argparse
import sys

from oscspline.data.generate_oscillator import (
    IntegrationParameters, simulate_oscillator, sweep_initial_velocities
)
from oscspline.modeling.cubic_spline import CubicSpline
from oscspline.util.export import write_trajectory
from oscspline.util.logging_config import setup_logging
from oscspline.util.metrics import energy_change, long_horizon_rmse, max_energy_drift
from oscspline.util.plotting import plot_spline, plot_trajectory, plot_trajectories

logger = logging.getLogger("oscspline.pipeline")

def dump_versions(art):
    pkgs = ["numpy","matplotlib","sympy","tqdm"]
    lines = []
    for mod in pkgs:
        try:
            m = importlib.import_module(mod)
            v = getattr(m, "__version__", "unknown")
        except ImportError:
            v = "not-importable"
        lines.append(f"{mod}=={v}")
    (art / "VERSIONS.txt").write_text("\n".join(lines))

def check_not_empty(arr, name):
    if arr is None or not hasattr(arr, 'size') or arr.size == 0:
        print(f"ERROR: {name} is empty or None. Halting execution.", file=sys.stderr)
        sys.exit(1)

def resample_with_spline(trajectory, n_nodes):
    """Fit a spline through n_nodes evenly spaced samples and compare it with the full run."""
    idx = np.unique(np.linspace(0, len(trajectory) - 1, n_nodes).astype(int))
    xs, ys = trajectory.times[idx], trajectory.positions[idx]
    spline = CubicSpline()
    model = spline.build(xs, ys, len(xs))
    rmse = long_horizon_rmse(trajectory.positions, model(trajectory.times))
    return model, (xs, ys), rmse

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="RK4 oscillator and cubic spline pipeline")
    p.add_argument("--begin", default="", help="Start of range and initial position (blank: 0)")
    p.add_argument("--end", default="", help="End of range (blank: 10; widened by 15 if span < 15)")
    p.add_argument("--h", default="", help="Step size (blank: 0.01)")
    p.add_argument("--lam", default="", help="Damping coefficient lambda (blank: 3)")
    p.add_argument("--v0", default="", help="Initial velocity x'(0) (blank: 1)")
    p.add_argument("--N", default="", help="Frequency parameter N (blank: 3)")
    p.add_argument("--extend", type=float, default=0.0, help="Extra time added to end")
    p.add_argument("--sweep", action="store_true", help="Also run v0 = -5..5 and plot the family")
    p.add_argument("--spline_nodes", type=int, default=40)
    p.add_argument("--out", default="artifacts")
    p.add_argument("--log_level", choices=["DEBUG","INFO","WARNING","ERROR"], default="INFO")
    p.add_argument("--log_file", default=None, help="Also write the log to this file")
    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)
    try:
        params = IntegrationParameters.from_fields(args.begin, args.end, args.h, args.lam, args.v0, args.N)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    if args.extend:
        params = params.extended(args.extend)
    if params.h <= 0:
        print(f"ERROR: --h must be > 0, got h={params.h}", file=sys.stderr)
        sys.exit(1)
    if args.spline_nodes < 2:
        print(f"ERROR: --spline_nodes must be >= 2, got {args.spline_nodes}", file=sys.stderr)
        sys.exit(1)
    art = Path(args.out); art.mkdir(parents=True, exist_ok=True)
    dump_versions(art)

    logger.info("1) Integrating on [%g, %g) with h=%g, lambda=%g, v0=%g, N=%g",
                params.begin, params.end, params.h, params.lam, params.v0, params.N)
    traj = simulate_oscillator(params)
    check_not_empty(traj.positions, "trajectory")
    write_trajectory(traj, art / "Output.txt")
    plot_trajectory(traj, art / "trajectory.png")

    if args.sweep:
        logger.info("2) Sweeping initial velocity over -5..5")
        runs = sweep_initial_velocities(params, progress=True)
        labels = [f"x'(0)={r.velocities[0]:g}" for r in runs]
        plot_trajectories(runs, art / "sweep.png", labels=labels)

    logger.info("3) Resampling the trajectory with a natural cubic spline")
    if len(traj) < 2:
        print("ERROR: Not enough samples to build a spline (need at least 2).", file=sys.stderr)
        sys.exit(1)
    model, (xs, ys), rmse = resample_with_spline(traj, args.spline_nodes)
    plot_spline(model, xs, ys, art / "spline.png", truth=(traj.times, traj.positions))

    out = {
        "begin": params.begin, "end": params.end, "h": params.h,
        "lambda": params.lam, "v0": params.v0, "N": params.N,
        "samples": len(traj),
        "final_state": list(traj.final_state),
        "energy_change": energy_change(traj.positions, traj.velocities),
        "spline_nodes": len(xs),
        "rmse_position_spline_vs_rk4": rmse,
        "sweep": bool(args.sweep),
    }
    if params.lam == 0:
        # only the undamped pendulum conserves E, so only then is a drift an error
        out["energy_drift"] = max_energy_drift(traj.positions, traj.velocities)
    (art/"summary.json").write_text(json.dumps(out, indent=2))
    print(json.dumps(out, indent=2))

if __name__ == "__main__":
    main()
