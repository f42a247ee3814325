from pathlib import Path

COLUMN_WIDTH = 20

def format_trajectory(trajectory):
    w = COLUMN_WIDTH
    lines = [f"x{'v':>{w}}{'t':>{w}}"]
    for x, v, t in zip(trajectory.positions, trajectory.velocities, trajectory.times):
        lines.append(f"{x:g}{v:>{w}g}{t:>{w}g}")
    return "\n".join(lines) + "\n"

def write_trajectory(trajectory, outpath):
    """Write position, velocity and time as whitespace-separated columns."""
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)
    outpath.write_text(format_trajectory(trajectory))
    return outpath
