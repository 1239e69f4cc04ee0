# hatchery: egg incubation & breeding idle game engine with headless simulation

from hatchery._types import RandomSource, compare
from hatchery.balance import Balance, DaycareBalance, GeneticsMultipliers, TraitBoost
from hatchery.cost_scaling import CostScaling
from hatchery.upgrades import PurchaseResult, UpgradeDef, UpgradeStatus
from hatchery.species import Evolution, SpeciesDef, SpeciesTable
from hatchery.egg import Creature, Egg
from hatchery.retro import RETRO_SPRITES, RetroSpriteDef, roll_retro_sprite
from hatchery.generation import create_wild_egg
from hatchery.breeding import (
    BreedingOdds,
    are_compatible,
    breeding_odds,
    create_breeding_egg,
)
from hatchery.criteria import Crit, Criterion
from hatchery.filters import Filter, check_against_filters
from hatchery.definition import GameConfig, GameDefinition
from hatchery.state import DaycareState, GameState
from hatchery.scheduler import Clock, Scheduler, SystemClock, VirtualClock
from hatchery.storage import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SaveManager,
    export_save,
    import_save,
)
from hatchery.incubator import HatchResult, Incubator
from hatchery.daycare import Daycare, DaycareStatus
from hatchery.evolution import evolve, possible_evolutions
from hatchery.session import GameSession, OfflineProgress
from hatchery.terminal import TerminalCondition, Terminal, SimulationContext
from hatchery.strategy import (
    Strategy,
    NoPurchases,
    GreedyCheapest,
    PriorityList,
    CustomStrategy,
)
from hatchery.metrics import MetricsCollector
from hatchery.simulation import BreedingSample, Simulation, simulate_breeding
from hatchery.report import SimulationReport, build_report
from hatchery.formatting import format_text_report

__all__ = [
    # Types
    "RandomSource",
    "compare",
    # Balance & upgrades
    "Balance",
    "DaycareBalance",
    "GeneticsMultipliers",
    "TraitBoost",
    "CostScaling",
    "UpgradeDef",
    "UpgradeStatus",
    "PurchaseResult",
    # Data model
    "Evolution",
    "SpeciesDef",
    "SpeciesTable",
    "Egg",
    "Creature",
    # Genetics
    "RETRO_SPRITES",
    "RetroSpriteDef",
    "roll_retro_sprite",
    "create_wild_egg",
    "BreedingOdds",
    "are_compatible",
    "breeding_odds",
    "create_breeding_egg",
    # Filters
    "Criterion",
    "Crit",
    "Filter",
    "check_against_filters",
    # Definition
    "GameConfig",
    "GameDefinition",
    # State & persistence
    "GameState",
    "DaycareState",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SaveManager",
    "export_save",
    "import_save",
    # Runtime
    "Clock",
    "SystemClock",
    "VirtualClock",
    "Scheduler",
    "HatchResult",
    "Incubator",
    "Daycare",
    "DaycareStatus",
    "evolve",
    "possible_evolutions",
    "GameSession",
    "OfflineProgress",
    # Terminal
    "TerminalCondition",
    "Terminal",
    "SimulationContext",
    # Strategy
    "Strategy",
    "NoPurchases",
    "GreedyCheapest",
    "PriorityList",
    "CustomStrategy",
    # Simulation
    "MetricsCollector",
    "Simulation",
    "BreedingSample",
    "simulate_breeding",
    "SimulationReport",
    "build_report",
    # Formatting
    "format_text_report",
]
