from __future__ import annotations

import argparse
import importlib
import logging
import sys
import time

from hatchery._types import BASE_RETRO, DAYCARE, EGG_SOURCES, FEMALE, GENDERLESS, MALE, SHELTER, STATS
from hatchery.breeding import breeding_odds
from hatchery.definition import GameDefinition
from hatchery.egg import Creature
from hatchery.formatting import (
    format_breeding_odds,
    format_breeding_sample,
    format_duration,
    format_text_report,
)
from hatchery.scheduler import SystemClock
from hatchery.session import GameSession
from hatchery.simulation import Simulation, simulate_breeding
from hatchery.storage import JsonFileStore, export_save, import_save
from hatchery.strategy import GreedyCheapest, NoPurchases, Strategy
from hatchery.terminal import Terminal, TerminalCondition

logger = logging.getLogger(__name__)

DEFAULT_SAVE = "hatchery_save.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hatchery",
        description="Hatchery: incubation and breeding idle game simulation CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a headless simulation")
    sim.add_argument("game_module", help="Python module with define_game()")
    sim.add_argument(
        "--strategy",
        default="greedy_cheapest",
        choices=["none", "greedy_cheapest"],
        help="Upgrade buying strategy (default: greedy_cheapest)",
    )
    sim.add_argument(
        "--egg-source",
        default=SHELTER,
        choices=list(EGG_SOURCES),
        help="Where the incubator gets eggs",
    )
    sim.add_argument(
        "--tick-resolution", type=float, default=1.0, help="Seconds per step"
    )
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument(
        "--terminal-time", type=float, default=3600, help="Max simulation time (s)"
    )
    sim.add_argument(
        "--terminal-eggs", type=int, default=None, help="Stop after N hatches"
    )
    sim.add_argument(
        "--terminal-shiny", type=int, default=None, help="Stop after N shinies"
    )
    sim.add_argument("--export-csv", default=None, help="CSV export path prefix")
    sim.add_argument("--export-json", default=None, help="JSON export path")
    sim.add_argument("--plot", default=None, help="Plot output path (PNG)")
    sim.add_argument(
        "--monte-carlo",
        type=int,
        default=None,
        help="Number of Monte Carlo runs",
    )

    odds = sub.add_parser("breed-odds", help="Show and sample bred-egg odds for a pair")
    odds.add_argument("game_module", help="Python module with define_game()")
    odds.add_argument("species1", help="First parent species name")
    odds.add_argument("species2", help="Second parent species name")
    for n in ("1", "2"):
        odds.add_argument(f"--gender{n}", default=None, help="M, F or -")
        odds.add_argument(f"--shiny{n}", action="store_true")
        odds.add_argument(f"--alpha{n}", action="store_true")
        odds.add_argument(f"--nature{n}", default="Hardy")
        odds.add_argument(f"--retro{n}", default=BASE_RETRO)
    odds.add_argument("--samples", type=int, default=0, help="Eggs to roll (0: odds only)")
    odds.add_argument("--seed", type=int, default=None, help="Random seed")

    exp = sub.add_parser("export-save", help="Print a save file as an export string")
    exp.add_argument("--save", default=DEFAULT_SAVE, help="Save file path")

    imp = sub.add_parser("import-save", help="Replace a save file from an export string")
    imp.add_argument("source", help="File holding the export string, or - for stdin")
    imp.add_argument("--save", default=DEFAULT_SAVE, help="Save file path")

    play = sub.add_parser("play", help="Resume a saved game in real time")
    play.add_argument("game_module", help="Python module with define_game()")
    play.add_argument("--save", default=DEFAULT_SAVE, help="Save file path")
    play.add_argument(
        "--seconds", type=float, default=0, help="Seconds to keep running after catch-up"
    )
    play.add_argument(
        "--egg-source", default=None, choices=list(EGG_SOURCES), help="Switch egg source"
    )

    return parser


def load_game(module_path: str) -> GameDefinition:
    """Import module and call define_game()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_game"):
        print(f"Error: module {module_path!r} has no define_game() function")
        sys.exit(1)
    return mod.define_game()


def build_strategy(name: str, egg_source: str = SHELTER) -> Strategy:
    strategy: Strategy
    if name == "none":
        strategy = NoPurchases()
    else:
        strategy = GreedyCheapest()
    if egg_source != SHELTER:
        strategy.egg_source = egg_source
    return strategy


def build_terminal(args: argparse.Namespace) -> TerminalCondition:
    conditions = [Terminal.time(args.terminal_time)]
    if args.terminal_eggs is not None:
        conditions.append(Terminal.eggs_hatched(args.terminal_eggs))
    if args.terminal_shiny is not None:
        conditions.append(Terminal.shiny_found(args.terminal_shiny))
    if len(conditions) == 1:
        return conditions[0]
    return Terminal.any(*conditions)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "simulate":
        _cmd_simulate(args)
    elif args.command == "breed-odds":
        _cmd_breed_odds(args)
    elif args.command == "export-save":
        store = JsonFileStore(args.save)
        print(export_save(store, int(time.time() * 1000)))
    elif args.command == "import-save":
        _cmd_import_save(args)
    elif args.command == "play":
        _cmd_play(args)


def _cmd_simulate(args: argparse.Namespace) -> None:
    definition = load_game(args.game_module)
    terminal = build_terminal(args)
    strategy = build_strategy(args.strategy, args.egg_source)

    if args.monte_carlo and args.monte_carlo > 1:
        _run_monte_carlo(definition, strategy, terminal, args)
        return

    sim = Simulation(
        definition=definition,
        strategy=strategy,
        terminal=terminal,
        tick_resolution=args.tick_resolution,
        seed=args.seed,
    )
    report = sim.run()
    print(format_text_report(report))

    if args.export_csv:
        from hatchery.export import export_csv
        export_csv(report, args.export_csv)
        print(f"\nCSV exported to {args.export_csv}_*.csv")

    if args.export_json:
        from hatchery.export import export_json
        export_json(report, args.export_json)
        print(f"\nJSON exported to {args.export_json}")

    if args.plot:
        from hatchery.visualization import plot_simulation
        plot_simulation(report, args.plot)
        print(f"\nPlot saved to {args.plot}")


def _make_parent(definition: GameDefinition, name: str, args: argparse.Namespace, n: str) -> Creature:
    sdef = definition.species.by_name(name)
    if sdef is None:
        print(f"Error: unknown species {name!r}")
        sys.exit(1)
    gender = getattr(args, f"gender{n}")
    if gender is None:
        gender = GENDERLESS if sdef.gender_rate < 0 else (FEMALE if n == "1" else MALE)
    return Creature(
        species_id=sdef.id,
        is_shiny=getattr(args, f"shiny{n}"),
        is_square_shiny=False,
        is_alpha=getattr(args, f"alpha{n}"),
        ivs={stat: 0 for stat in STATS},
        nature=getattr(args, f"nature{n}"),
        gender=gender,
        retro=getattr(args, f"retro{n}"),
    )


def _cmd_breed_odds(args: argparse.Namespace) -> None:
    definition = load_game(args.game_module)
    parent1 = _make_parent(definition, args.species1, args, "1")
    parent2 = _make_parent(definition, args.species2, args, "2")

    odds = breeding_odds(parent1, parent2, definition.species, definition.balance)
    if odds is None:
        print(f"{args.species1} and {args.species2} cannot breed")
        sys.exit(1)
    print(format_breeding_odds(odds, definition.species))

    if args.samples > 0:
        sample = simulate_breeding(
            parent1,
            parent2,
            definition.species,
            definition.balance,
            count=args.samples,
            seed=args.seed,
        )
        if sample is not None:
            print()
            print(format_breeding_sample(sample, definition.species))


def _cmd_import_save(args: argparse.Namespace) -> None:
    if args.source == "-":
        text = sys.stdin.read()
    else:
        with open(args.source) as f:
            text = f.read()
    store = JsonFileStore(args.save)
    if not import_save(store, text):
        print("Error: invalid save data")
        sys.exit(1)
    print(f"Imported {len(store.keys())} keys into {args.save}")


def _cmd_play(args: argparse.Namespace) -> None:
    definition = load_game(args.game_module)
    session = GameSession(definition, store=JsonFileStore(args.save), clock=SystemClock())
    logger.info("Resuming %s from %s", definition.config.name, args.save)
    if args.egg_source:
        session.set_egg_source(args.egg_source)

    progress = session.start()
    state = session.state
    print(
        f"Welcome back: {len(progress.hatched)} eggs hatched "
        f"and {len(progress.bred)} eggs bred while away"
    )

    deadline = time.monotonic() + args.seconds
    try:
        while time.monotonic() < deadline:
            session.run_pending()
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()

    remaining = session.daycare.remaining_ms(session.now())
    print(f"Hatched: {state.egg_hatched}  Shiny: {state.shiny_hatched}")
    print(f"Pokedollars: {state.pokedollars}  Rare candy: {state.rare_candy}")
    print(f"PC: {state.pc_count()}/{len(state.pc)}  Incubating: {len(state.incubator)}")
    if state.egg_source == DAYCARE or state.daycare.has_pair:
        print(
            f"Daycare: {len(state.daycare.eggs)} eggs queued, "
            f"next egg in {format_duration(remaining)}"
        )


def _run_monte_carlo(
    definition: GameDefinition,
    strategy: Strategy,
    terminal: TerminalCondition,
    args: argparse.Namespace,
) -> None:
    """Run multiple simulations and report aggregate results."""
    n = args.monte_carlo
    hatched: list[int] = []
    shinies: list[int] = []
    first_shiny: list[float] = []

    for i in range(n):
        sim = Simulation(
            definition=definition,
            strategy=strategy,
            terminal=terminal,
            tick_resolution=args.tick_resolution,
            seed=(args.seed + i) if args.seed is not None else None,
        )
        report = sim.run()
        hatched.append(report.eggs_hatched)
        shinies.append(report.shinies)
        if report.first_shiny_time is not None:
            first_shiny.append(report.first_shiny_time)

    print(f"Monte Carlo: {n} runs")
    print(f"Eggs hatched: mean={sum(hatched)/n:.1f}, "
          f"min={min(hatched)}, max={max(hatched)}")
    print(f"Shinies: mean={sum(shinies)/n:.2f}, runs with a shiny={len(first_shiny)}/{n}")
    if first_shiny:
        mean = sum(first_shiny) / len(first_shiny)
        print(f"First shiny: mean={mean:.1f}s, "
              f"min={min(first_shiny):.1f}s, max={max(first_shiny):.1f}s")
