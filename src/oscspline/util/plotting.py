import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path

def plot_trajectory(trajectory, outpath, title="RK4 trajectory"):
    return plot_trajectories([trajectory], outpath, title=title)

def plot_trajectories(trajectories, outpath, labels=None, title="RK4 trajectories"):
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    plt.figure(figsize=(7,4))
    for k, tr in enumerate(trajectories):
        label = labels[k] if labels is not None else None
        plt.plot(tr.times, tr.positions, linewidth=1.5, label=label)
    plt.xlabel("t")
    plt.ylabel("x")
    if labels is not None:
        plt.legend(frameon=False, fontsize=7)
    plt.title(title)
    plt.grid(linestyle="-.", linewidth=0.5)
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()
    return outpath

def plot_spline(model, x_nodes, y_nodes, outpath, n_points=400, truth=None):
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    grid = np.linspace(x_nodes[0], x_nodes[-1], n_points)
    plt.figure(figsize=(7,4))
    if truth is not None:
        plt.plot(truth[0], truth[1], ":", label="RK4", linewidth=1.8)
    plt.plot(grid, model(grid), label="cubic spline", linewidth=2)
    plt.plot(x_nodes, y_nodes, "o", markersize=3, label="nodes")
    plt.xlabel("t")
    plt.ylabel("x")
    plt.legend(frameon=False)
    plt.title("Natural cubic spline through sampled trajectory")
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()
    return outpath
