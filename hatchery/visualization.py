from __future__ import annotations

from hatchery.report import SimulationReport


def plot_simulation(
    report: SimulationReport,
    output_path: str | None = None,
) -> None:
    """Generate a 4-panel matplotlib visualization of simulation results.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install hatchery[viz]"
        )

    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(
        f"Hatchery Simulation: {report.strategy_description}",
        fontsize=14,
    )

    # 1. Cumulative hatches and shinies
    ax1 = axes[0][0]
    for attr, label in (("eggs_hatched", "hatched"), ("shiny_hatched", "shiny")):
        series = report.series(attr)
        if series:
            times, values = zip(*series)
            ax1.plot(times, values, label=label)
    ax1.set_xlabel("Time (s)")
    ax1.set_ylabel("Count")
    ax1.set_title("Eggs Hatched")
    ax1.legend(fontsize=8)
    ax1.grid(True, alpha=0.3)

    # 2. Currencies over time
    ax2 = axes[0][1]
    for attr in ("pokedollars", "rare_candy"):
        series = report.series(attr)
        if series:
            times, values = zip(*series)
            ax2.plot(times, values, label=attr)
    for p in report.purchases:
        ax2.axvline(p.time, color="grey", alpha=0.2)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Amount")
    ax2.set_title("Currencies (purchases marked)")
    ax2.legend(fontsize=8)
    ax2.grid(True, alpha=0.3)

    # 3. PC fill and daycare queue
    ax3 = axes[1][0]
    for attr in ("pc_count", "daycare_eggs"):
        series = report.series(attr)
        if series:
            times, values = zip(*series)
            ax3.plot(times, values, label=attr)
    ax3.set_xlabel("Time (s)")
    ax3.set_title("Storage")
    ax3.legend(fontsize=8)
    ax3.grid(True, alpha=0.3)

    # 4. Perfect IV distribution of hatches
    ax4 = axes[1][1]
    if report.hatches:
        counts = [h.perfect_ivs for h in report.hatches]
        ax4.hist(counts, bins=range(0, 8), align="left", alpha=0.7)
        ax4.set_xticks(range(0, 7))
        ax4.set_xlabel("Perfect IVs")
        ax4.set_ylabel("Count")
        ax4.set_title("Perfect IV Distribution")
        ax4.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
