"""MCP server wrapping a GameSession for interactive AI playtesting."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any

from mcp.server.fastmcp import FastMCP

from hatchery.breeding import breeding_odds
from hatchery.criteria import criterion_from_dict
from hatchery.definition import GameDefinition
from hatchery.egg import Creature
from hatchery.incubator import HatchResult
from hatchery.retro import retro_display_name
from hatchery.scheduler import VirtualClock
from hatchery.session import GameSession
from hatchery.storage import MemoryStore
from hatchery.upgrades import upgrade_statuses

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum PC entries per list_pc() call
_MAX_PAGE = 200


@dataclass
class _GameHolder:
    """Holds the active game definition and session."""

    definition: GameDefinition
    seed: int | None = None
    session: GameSession = field(init=False)
    _recent: list[HatchResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.new_session()

    def new_session(self) -> None:
        self._recent = []
        self.session = GameSession(
            self.definition,
            store=MemoryStore(),
            clock=VirtualClock(),
            rng=random.Random(self.seed),
            on_hatch=self._recent.append,
        )
        self.session.start()


def _species_name(holder: _GameHolder, species_id: int) -> str:
    sdef = holder.definition.species.get(species_id)
    return sdef.name if sdef else f"#{species_id}"


def _creature_info(holder: _GameHolder, creature: Creature) -> dict[str, Any]:
    return {
        "species": _species_name(holder, creature.species_id),
        "shiny": creature.is_shiny,
        "square_shiny": creature.is_square_shiny,
        "alpha": creature.is_alpha,
        "gender": creature.gender,
        "nature": creature.nature,
        "ivs": dict(creature.ivs),
        "perfect_ivs": creature.perfect_iv_count,
        "retro": retro_display_name(creature.retro),
    }


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    bal = defn.balance
    return {
        "name": defn.config.name,
        "species": [
            {"id": s.id, "name": s.name, "rarity": s.rarity, "egg_steps": s.egg_steps}
            for s in defn.species
            if s.has_egg
        ],
        "shiny_odds": bal.shiny_odds,
        "alpha_odds": bal.alpha_odds,
        "incubator_capacity": bal.incubator_capacity,
        "pc_capacity": bal.pc_capacity,
        "upgrades": [
            {"id": u.id, "display_name": u.display_name, "description": u.description}
            for u in bal.upgrades.values()
        ],
    }


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    session = holder.session
    state = session.state
    now = session.now()
    eggs = []
    for egg in state.incubator:
        sdef = holder.definition.species.get(egg.species_id)
        eggs.append({
            "species": _species_name(holder, egg.species_id),
            "steps": egg.steps,
            "egg_steps": sdef.egg_steps if sdef else None,
        })
    return {
        "time_elapsed": round(now / 1000, 2),
        "paused": state.paused,
        "egg_source": state.egg_source,
        "eggs_hatched": state.egg_hatched,
        "shiny_hatched": state.shiny_hatched,
        "pokedollars": state.pokedollars,
        "rare_candy": state.rare_candy,
        "pc_count": state.pc_count(),
        "incubator": eggs,
        "daycare_status": session.daycare.status(now).value,
        "daycare_eggs": len(state.daycare.eggs),
    }


def _tool_list_pc(holder: _GameHolder, offset: int = 0, limit: int = 50) -> dict[str, Any]:
    if limit < 1 or limit > _MAX_PAGE:
        return {"error": f"Limit must be between 1 and {_MAX_PAGE}"}
    occupied = [
        (i, c) for i, c in enumerate(holder.session.state.pc) if c is not None
    ]
    page = occupied[offset:offset + limit]
    return {
        "total": len(occupied),
        "creatures": [
            {"index": i, **_creature_info(holder, c)} for i, c in page
        ],
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    holder._recent.clear()
    holder.session.wait(int(seconds * 1000))
    hatched = list(holder._recent)
    holder._recent.clear()

    state = holder.session.state
    result: dict[str, Any] = {
        "waited": seconds,
        "hatched": len(hatched),
        "kept": sum(1 for h in hatched if h.kept),
        "pokedollars": state.pokedollars,
        "rare_candy": state.rare_candy,
    }
    highlights = [
        _creature_info(holder, h.creature)
        for h in hatched
        if h.creature.is_shiny or h.creature.is_alpha
    ]
    if highlights:
        result["highlights"] = highlights
    return result


def _tool_toggle_pause(holder: _GameHolder) -> dict[str, Any]:
    return {"paused": holder.session.toggle_pause()}


def _tool_set_egg_source(holder: _GameHolder, source: str) -> dict[str, Any]:
    if not holder.session.set_egg_source(source):
        return {"error": f"Unknown egg source: {source!r}"}
    return {"egg_source": source}


def _tool_get_upgrades(holder: _GameHolder) -> dict[str, Any]:
    statuses = upgrade_statuses(holder.definition.balance.upgrades, holder.session.state)
    return {
        "pokedollars": holder.session.state.pokedollars,
        "upgrades": [
            {
                "id": u.id,
                "display_name": u.display_name,
                "level": u.level,
                "cost": u.cost,
                "affordable": u.affordable,
                "max_level": u.max_level,
            }
            for u in statuses
        ],
    }


def _tool_buy_upgrade(holder: _GameHolder, upgrade_id: str) -> dict[str, Any]:
    result = holder.session.buy_upgrade(upgrade_id)
    if result.success:
        return {"success": True, "new_level": result.new_level, "cost": result.cost}
    return {"success": False, "reason": result.message}


def _tool_list_filters(holder: _GameHolder) -> dict[str, Any]:
    return {
        "filters": [
            {"id": f.id, "name": f.name, "active": f.active, "criteria": f.describe()}
            for f in holder.session.state.filters
        ]
    }


def _tool_save_filter(
    holder: _GameHolder, name: str, criteria: list[dict[str, Any]]
) -> dict[str, Any]:
    try:
        parsed = [criterion_from_dict(c) for c in criteria]
    except (TypeError, ValueError) as e:
        return {"success": False, "errors": [str(e)]}
    errors = holder.session.save_filter(name, parsed)
    if errors:
        return {"success": False, "errors": errors}
    return {"success": True, "filter_id": holder.session.state.filters[-1].id}


def _tool_toggle_filter(holder: _GameHolder, filter_id: str) -> dict[str, Any]:
    active = holder.session.toggle_filter(filter_id)
    if active is None:
        return {"error": f"Unknown filter: {filter_id!r}"}
    return {"filter_id": filter_id, "active": active}


def _tool_delete_filter(holder: _GameHolder, filter_id: str) -> dict[str, Any]:
    if not holder.session.delete_filter(filter_id):
        return {"error": f"Unknown filter: {filter_id!r}"}
    return {"success": True}


def _tool_get_daycare(holder: _GameHolder) -> dict[str, Any]:
    session = holder.session
    daycare = session.daycare
    now = session.now()
    parent1, parent2 = daycare.parents()
    result: dict[str, Any] = {
        "status": daycare.status(now).value,
        "breeders": list(session.state.daycare.breeders),
        "remaining_seconds": None,
        "eggs": len(session.state.daycare.eggs),
        "max_eggs": daycare.max_eggs(),
    }
    remaining = daycare.remaining_ms(now)
    if remaining is not None:
        result["remaining_seconds"] = round(remaining / 1000, 1)
    if parent1 is not None and parent2 is not None:
        odds = breeding_odds(parent1, parent2, holder.definition.species, holder.definition.balance)
        result["compatible"] = odds is not None
        if odds is not None:
            result["odds"] = {
                "species": _species_name(holder, odds.species_id),
                "shiny": odds.shiny,
                "alpha": odds.alpha,
                "nature": odds.nature,
                "retro": odds.retro,
            }
    return result


def _tool_set_breeders(holder: _GameHolder, index1: int, index2: int) -> dict[str, Any]:
    if not holder.session.set_breeders(index1, index2):
        return {"success": False, "reason": "Both PC slots must hold a creature"}
    if not holder.session.start_breeding():
        return {"success": False, "reason": "These creatures cannot breed"}
    return {"success": True}


def _tool_toggle_breeding(holder: _GameHolder) -> dict[str, Any]:
    session = holder.session
    if session.daycare.is_paused or session.state.daycare.egg_timer is None:
        return {"breeding": session.start_breeding()}
    session.pause_breeding()
    return {"breeding": False}


def _tool_evolve(holder: _GameHolder, index: int, evolves_to: str) -> dict[str, Any]:
    if not holder.session.evolve(index, evolves_to):
        return {"success": False, "reason": "Evolution conditions not met"}
    return {"success": True, "rare_candy": holder.session.state.rare_candy}


def _tool_export_save(holder: _GameHolder) -> dict[str, Any]:
    return {"save": holder.session.export_save()}


def _tool_import_save(holder: _GameHolder, save: str) -> dict[str, Any]:
    if not holder.session.import_save(save):
        return {"success": False, "reason": "Invalid save data"}
    return {"success": True}


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    holder.new_session()
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(definition: GameDefinition, seed: int | None = None) -> FastMCP:
    """Create an MCP server wrapping a GameSession for the given definition."""
    holder = _GameHolder(definition=definition, seed=seed)

    mcp = FastMCP(
        name=f"Hatchery: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static game overview: species, odds, capacities, upgrades."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get current state: counters, currencies, incubator eggs, daycare status."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def list_pc(offset: int = 0, limit: int = 50) -> dict[str, Any]:
        """List stored creatures with their PC index, traits and IVs."""
        return _tool_list_pc(holder, offset, limit)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400). Reports hatches."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def toggle_pause() -> dict[str, Any]:
        """Pause or resume the incubator and daycare drivers."""
        return _tool_toggle_pause(holder)

    @mcp.tool()
    def set_egg_source(source: str) -> dict[str, Any]:
        """Choose 'shelter' (wild eggs) or 'daycare' (bred eggs) for the incubator."""
        return _tool_set_egg_source(holder, source)

    @mcp.tool()
    def get_upgrades() -> dict[str, Any]:
        """Get every upgrade with level, next cost and affordability."""
        return _tool_get_upgrades(holder)

    @mcp.tool()
    def buy_upgrade(upgrade_id: str) -> dict[str, Any]:
        """Buy the next level of an upgrade."""
        return _tool_buy_upgrade(holder, upgrade_id)

    @mcp.tool()
    def list_filters() -> dict[str, Any]:
        """List keep filters and their criteria."""
        return _tool_list_filters(holder)

    @mcp.tool()
    def save_filter(name: str, criteria: list[dict[str, Any]]) -> dict[str, Any]:
        """Create a keep filter from criteria like {"type": "shiny", "value": "Yes"}."""
        return _tool_save_filter(holder, name, criteria)

    @mcp.tool()
    def toggle_filter(filter_id: str) -> dict[str, Any]:
        """Activate or deactivate a filter."""
        return _tool_toggle_filter(holder, filter_id)

    @mcp.tool()
    def delete_filter(filter_id: str) -> dict[str, Any]:
        """Delete a filter."""
        return _tool_delete_filter(holder, filter_id)

    @mcp.tool()
    def get_daycare() -> dict[str, Any]:
        """Get daycare parents, timer, queued eggs and the pair's trait odds."""
        return _tool_get_daycare(holder)

    @mcp.tool()
    def set_breeders(index1: int, index2: int) -> dict[str, Any]:
        """Put two PC creatures in the daycare and start breeding."""
        return _tool_set_breeders(holder, index1, index2)

    @mcp.tool()
    def toggle_breeding() -> dict[str, Any]:
        """Pause a running breeding timer, or start/resume it."""
        return _tool_toggle_breeding(holder)

    @mcp.tool()
    def evolve(index: int, evolves_to: str) -> dict[str, Any]:
        """Evolve the creature in a PC slot, spending rare candy."""
        return _tool_evolve(holder, index, evolves_to)

    @mcp.tool()
    def export_save() -> dict[str, Any]:
        """Export the whole save as a base64 string."""
        return _tool_export_save(holder)

    @mcp.tool()
    def import_save(save: str) -> dict[str, Any]:
        """Replace the game with an exported save string."""
        return _tool_import_save(holder, save)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder)

    return mcp
