from __future__ import annotations

import csv
import json
from pathlib import Path

from hatchery.report import SimulationReport


def export_csv(report: SimulationReport, path: str | Path) -> None:
    """Export simulation data as CSV files.

    Creates three files:
      - {path}_snapshots.csv
      - {path}_hatches.csv
      - {path}_purchases.csv
    """
    base = str(path)

    # State snapshots
    with open(f"{base}_snapshots.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "time", "eggs_hatched", "shiny_hatched", "pokedollars",
            "rare_candy", "pc_count", "incubating", "daycare_eggs",
        ])
        for s in report.snapshots:
            writer.writerow([
                s.time, s.eggs_hatched, s.shiny_hatched, s.pokedollars,
                s.rare_candy, s.pc_count, s.incubating, s.daycare_eggs,
            ])

    # Hatches
    with open(f"{base}_hatches.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "time", "species_id", "is_shiny", "is_square_shiny", "is_alpha",
            "perfect_ivs", "retro", "kept", "rare_candy",
        ])
        for h in report.hatches:
            writer.writerow([
                h.time, h.species_id, h.is_shiny, h.is_square_shiny, h.is_alpha,
                h.perfect_ivs, h.retro, h.kept, h.rare_candy,
            ])

    # Purchases
    with open(f"{base}_purchases.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "upgrade_id", "cost", "new_level", "pokedollars_after"])
        for p in report.purchases:
            writer.writerow([p.time, p.upgrade_id, p.cost, p.new_level, p.pokedollars_after])


def export_json(report: SimulationReport, path: str | Path) -> None:
    """Export full simulation report as JSON."""
    data = {
        "game": report.game_name,
        "strategy": report.strategy_description,
        "terminal": report.terminal_description,
        "outcome": report.outcome,
        "total_time": report.total_time,
        "eggs_hatched": report.eggs_hatched,
        "shinies": report.shinies,
        "square_shinies": report.square_shinies,
        "alphas": report.alphas,
        "kept": report.kept,
        "discarded": report.discarded,
        "rare_candy_found": report.rare_candy_found,
        "retro_counts": report.retro_counts,
        "first_shiny_time": report.first_shiny_time,
        "hatches_per_minute": report.hatches_per_minute,
        "purchases_per_minute": report.purchases_per_minute,
        "final_levels": report.final_levels,
        "purchases": [
            {
                "time": p.time,
                "upgrade_id": p.upgrade_id,
                "cost": p.cost,
                "new_level": p.new_level,
            }
            for p in report.purchases
        ],
    }
    with open(str(path), "w") as f:
        json.dump(data, f, indent=2)
