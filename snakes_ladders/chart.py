"""Bar chart of win rates per seat from a batch simulation."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt
from matplotlib.colors import is_color_like

SEAT_COLOR = "#4A90D9"


def make_win_rate_chart(
    win_rates: dict[str, float],
    output_path: str = "win_rates.png",
    title: str = "Snakes & Ladders win rate by seat",
    colors: list[str] | None = None,
) -> str:
    """Draw one column per seat, in seating order, against the fair share.

    *win_rates* maps seat labels to a 0–1 share of games won. *colors* are
    the players' colours, one per seat. The dashed line marks 1 / seats, the
    rate every seat would have if turn order gave no advantage.

    Returns the path to the saved PNG.
    """
    seats = list(win_rates)
    percents = [win_rates[seat] * 100 for seat in seats]
    fair = 100 / len(seats) if seats else 0

    fig, ax = plt.subplots(figsize=(max(4, len(seats) * 1.6), 4.5))
    columns = ax.bar(
        seats, percents,
        color=_seat_colors(colors, len(seats)),
        edgecolor="black", linewidth=0.8,
    )
    ax.bar_label(columns, labels=[f"{p:.1f}%" for p in percents], padding=3)

    if seats:
        ax.axhline(fair, color="grey", linestyle="--", linewidth=1)
        ax.annotate(
            f"fair share {fair:.0f}%", xy=(1, fair), xycoords=("axes fraction", "data"),
            xytext=(-4, 4), textcoords="offset points", ha="right", color="grey",
        )

    ax.set_ylabel("Games won (%)")
    ax.set_ylim(0, max(percents + [fair]) * 1.2 + 1)
    ax.set_title(title, fontsize=14, fontweight="bold")

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def _seat_colors(colors: list[str] | None, seats: int) -> str | list[str]:
    # Player colours are free text; anything matplotlib can't draw gets the default.
    if not colors or len(colors) != seats:
        return SEAT_COLOR
    return [c if is_color_like(c) else SEAT_COLOR for c in colors]
