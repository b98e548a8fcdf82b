"""Example rendering an idle-game currency that outgrows every float.

The currency is multiplied, then raised to a power, then tetrated as the game
progresses, so its size is plotted on a super-logarithmic axis (``slog10``)
and every tick label is written by a different notation.
"""

from __future__ import annotations

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Set non-interactive backend
import matplotlib.pyplot as plt
import plotly.graph_objects as go

from eternum import (
    DefaultNotation,
    HypersplitNotation,
    Magnitude,
    ScientificNotation,
    slog,
    tetrate,
    to_magnitude,
)


def simulate(ticks: int = 120) -> list[Magnitude]:
    """Currency after each tick.

    Returns
    -------
    list[Magnitude]
        One value per tick, starting at 10.
    """
    values = [to_magnitude(10)]
    for tick in range(1, ticks):
        current = values[-1]
        if tick < 40:
            current = current * 1e8  # early game: multipliers
        elif tick < 80:
            current = current.pow(1.5)  # mid game: exponent upgrades
        else:
            current = tetrate(10, slog(current, 10).to_float() + 0.25)  # late game: tetration
        values.append(current)
    return values


def plot_growth(values: list[Magnitude], name: str = "") -> tuple[go.Figure, plt.Figure]:
    """Plot ``slog10`` of the currency and label the ticks with three notations.

    Parameters
    ----------
    values : list[Magnitude]
        Currency per tick.
    name : str
        Base name for saving files

    Returns
    -------
    tuple[go.Figure, plt.Figure]
        Plotly and Matplotlib figures
    """
    ticks = np.arange(len(values))
    heights = np.array([slog(v, 10).to_float() for v in values])

    notations = {
        "default": DefaultNotation(),
        "scientific": ScientificNotation(max_es_in_a_row=2),
        "hypersplit": HypersplitNotation(),
    }
    label_ticks = ticks[::20]
    labels = {
        key: [notation.format(values[i]) for i in label_ticks]
        for key, notation in notations.items()
    }

    # Create plotly figure
    fig_plotly = go.Figure()
    fig_plotly.add_trace(
        go.Scatter(x=ticks, y=heights,
                  name="slog10(currency)",
                  text=[notations["default"].format(v) for v in values],
                  hovertemplate="tick %{x}: %{text}",
                  line=dict(color="blue", width=2))
    )
    fig_plotly.update_layout(
        title=dict(text="Idle currency growth", x=0.5, xanchor='center'),
        xaxis=dict(title="tick", showgrid=True, gridcolor='lightgray'),
        yaxis=dict(title="slog10(currency)", showgrid=True, gridcolor='lightgray'),
        plot_bgcolor='white',
        width=800,
        height=500
    )

    # Create matplotlib figure
    fig_mpl, axes = plt.subplots(len(notations), 1, figsize=(10, 10), sharex=True)
    plt.suptitle("Idle currency growth", fontsize=16)
    for ax, (key, texts) in zip(axes, labels.items()):
        ax.plot(ticks, heights, 'b-', linewidth=2)
        ax.set_yticks(heights[label_ticks])
        ax.set_yticklabels(texts, fontsize=8)
        ax.grid(True, linestyle='--', alpha=0.7)
        ax.set_title(key)
    axes[-1].set_xlabel('tick')

    plt.tight_layout()

    # Save figures
    if name:
        fig_plotly.write_html(f"{name}.html")
        fig_mpl.savefig(f"{name}.png", dpi=300, bbox_inches='tight')
        plt.close(fig_mpl)  # Close matplotlib figure to free memory

    return fig_plotly, fig_mpl


def main():
    """Simulate a run, print a few checkpoints and save the plots."""
    values = simulate()
    notation = DefaultNotation()
    for tick in (0, 39, 79, 119):
        print(f"tick {tick:3d}: {notation.format(values[tick])}")
    plot_growth(values, name="idle_growth")


if __name__ == "__main__":
    main()
