from __future__ import annotations

from typing import TYPE_CHECKING

from hatchery.report import SimulationReport
from hatchery.retro import retro_display_name

if TYPE_CHECKING:
    from hatchery.breeding import BreedingOdds
    from hatchery.simulation import BreedingSample
    from hatchery.species import SpeciesTable


def format_odds(probability: float) -> str:
    """'1 in 4,096' style odds; '-' for an impossible roll."""
    if not probability > 0:
        return "-"
    if probability >= 1:
        return "1 in 1 (100%)"
    return f"1 in {round(1 / probability):,}"


def format_duration(ms: int | None) -> str:
    if ms is None:
        return "-"
    seconds = max(0, ms) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    return f"{minutes}m {seconds:02d}s"


def format_breeding_odds(odds: BreedingOdds, species: SpeciesTable) -> str:
    sdef = species.get(odds.species_id)
    lines = [
        f"Egg: {sdef.name if sdef else odds.species_id}",
        f"Shiny: {format_odds(odds.shiny)}",
        f"Alpha: {format_odds(odds.alpha)}",
    ]
    if odds.nature:
        lines.append(f"Nature: {odds.nature_chance:.0%} {odds.nature}, otherwise random")
    else:
        lines.append("Nature: random")
    if odds.retro:
        for name, p in odds.retro.items():
            lines.append(f"Retro ({retro_display_name(name)}): {format_odds(p)}")
    else:
        lines.append("Retro: base odds (no parent retro)")
    return "\n".join(lines)


def format_breeding_sample(sample: BreedingSample, species: SpeciesTable) -> str:
    lines = [f"Sampled eggs: {sample.count:,}"]
    lines.append(f"  Shiny: {sample.shiny} ({format_odds(sample.rate(sample.shiny))})")
    lines.append(f"  Alpha: {sample.alpha} ({format_odds(sample.rate(sample.alpha))})")
    for species_id, n in sorted(sample.species.items()):
        sdef = species.get(species_id)
        lines.append(f"  Species {sdef.name if sdef else species_id}: {n}")
    for gender, n in sorted(sample.genders.items()):
        lines.append(f"  Gender {gender}: {n}")
    for name, n in sorted(sample.retro.items(), key=lambda kv: -kv[1]):
        lines.append(f"  Retro {retro_display_name(name)}: {n}")
    for perfect, n in sample.perfect_ivs.items():
        lines.append(f"  {perfect} perfect IVs: {n}")
    return "\n".join(lines)


def format_text_report(report: SimulationReport) -> str:
    """Format a simulation report for console output."""
    lines: list[str] = []

    lines.append("=" * 40 + " Hatchery Simulation Report " + "=" * 40)
    if report.game_name:
        lines.append(f"Game: {report.game_name}")
    lines.append(f"Strategy: {report.strategy_description}")
    lines.append(f"Terminal: {report.terminal_description}")
    lines.append(f"Result: {report.outcome} at {report.total_time:.1f}s")
    lines.append("")

    # Hatches
    lines.append("HATCHES:")
    lines.append(f"  Total: {report.eggs_hatched}")
    lines.append(f"  Rate: {report.hatches_per_minute:.2f}/min")
    lines.append(f"  Kept: {report.kept}  Released: {report.discarded}")
    lines.append(f"  Shiny: {report.shinies} (square: {report.square_shinies})")
    lines.append(f"  Alpha: {report.alphas}")
    lines.append(f"  Rare candy found: {report.rare_candy_found}")
    if report.first_shiny_time is not None:
        lines.append(f"  First shiny at: {report.first_shiny_time:.1f}s")
    lines.append("")

    if report.retro_counts:
        lines.append("RETRO SPRITES:")
        for name, n in sorted(report.retro_counts.items(), key=lambda kv: -kv[1]):
            lines.append(f"  * {retro_display_name(name):.<30s} {n}")
        lines.append("")

    # Purchase summary
    lines.append("PURCHASES:")
    lines.append(f"  Total: {len(report.purchases)}")
    lines.append(f"  Rate: {report.purchases_per_minute:.2f}/min")
    for upgrade_id, level in sorted(report.final_levels.items()):
        lines.append(f"  {upgrade_id:.<30s} level {level}")

    return "\n".join(lines)
