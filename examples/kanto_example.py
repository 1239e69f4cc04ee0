"""Small Kanto-style hatchery used by the CLI, MCP server and tests."""
from __future__ import annotations

from hatchery.balance import Balance
from hatchery.definition import GameConfig, GameDefinition
from hatchery.species import SpeciesTable

SPECIES = [
    {
        "id": 1, "name": "Bulbasaur", "egg_group": ["monster", "grass"],
        "gender_rate": 88, "rarity": "rare", "gen": 1, "egg_steps": 1280,
        "egg_sprite": "sprites/eggs/grass.png",
        "sprite": "sprites/pokemon/base/1.png",
        "evolutions": [{"evolves_to": "Ivysaur", "method": ["level"], "value": 16}],
    },
    {
        "id": 2, "name": "Ivysaur", "egg_group": ["monster", "grass"],
        "gender_rate": 88, "rarity": "rare", "gen": 1, "egg_steps": 1280,
        "sprite": "sprites/pokemon/base/2.png",
    },
    {
        "id": 4, "name": "Charmander", "egg_group": ["monster", "dragon"],
        "gender_rate": 88, "rarity": "rare", "gen": 1, "egg_steps": 1280,
        "egg_sprite": "sprites/eggs/fire.png",
        "sprite": "sprites/pokemon/base/4.png",
    },
    {
        "id": 19, "name": "Rattata", "egg_group": ["field"],
        "gender_rate": 50, "rarity": "common", "gen": 1, "egg_steps": 400,
        "egg_sprite": "sprites/eggs/normal.png",
        "sprite": "sprites/pokemon/base/19.png",
        "evolutions": [{"evolves_to": "Raticate", "method": ["level"], "value": 20}],
    },
    {
        "id": 20, "name": "Raticate", "egg_group": ["field"],
        "gender_rate": 50, "rarity": "uncommon", "gen": 1, "egg_steps": 400,
        "sprite": "sprites/pokemon/base/20.png",
    },
    {
        "id": 29, "name": "Nidoran♀", "egg_group": ["monster", "field"],
        "gender_rate": 0, "rarity": "uncommon", "gen": 1, "egg_steps": 640,
        "egg_sprite": "sprites/eggs/poison.png",
        "sprite": "sprites/pokemon/base/29.png",
    },
    {
        "id": 32, "name": "Nidoran♂", "egg_group": ["monster", "field"],
        "gender_rate": 100, "rarity": "uncommon", "gen": 1, "egg_steps": 640,
        "egg_sprite": "sprites/eggs/poison.png",
        "sprite": "sprites/pokemon/base/32.png",
    },
    {
        "id": 81, "name": "Magnemite", "egg_group": ["mineral"],
        "gender_rate": "-", "rarity": "uncommon", "gen": 1, "egg_steps": 640,
        "egg_sprite": "sprites/eggs/steel.png",
        "sprite": "sprites/pokemon/base/81.png",
    },
    {
        "id": 132, "name": "Ditto",
        # shares every group used here so it can pair with any gendered species
        "egg_group": ["ditto", "monster", "grass", "dragon", "field", "fairy", "humanshape"],
        "gender_rate": "-", "rarity": "special", "gen": 1, "egg_steps": 640,
        "sprite": "sprites/pokemon/base/132.png",
    },
    {
        "id": 133, "name": "Eevee", "egg_group": ["field"],
        "gender_rate": 88, "rarity": "rare", "gen": 1, "egg_steps": 1280,
        "egg_sprite": "sprites/eggs/normal.png",
        "sprite": "sprites/pokemon/base/133.png",
    },
    {
        "id": 172, "name": "Pichu", "egg_group": ["field", "fairy"],
        "gender_rate": 50, "rarity": "uncommon", "gen": 2, "egg_steps": 400,
        "egg_sprite": "sprites/eggs/electric.png",
        "sprite": "sprites/pokemon/base/172.png",
        "evolutions": [{"evolves_to": "Pikachu", "method": ["level"], "value": 5}],
    },
    {
        "id": 25, "name": "Pikachu", "egg_group": ["field", "fairy"],
        "gender_rate": 50, "rarity": "uncommon", "gen": 1, "egg_steps": 400,
        "sprite": "sprites/pokemon/base/25.png",
        "evolutions": [
            {"evolves_to": "Raichu", "method": ["item"], "value_2": "thunder-stone"},
        ],
    },
    {
        "id": 26, "name": "Raichu", "egg_group": ["field", "fairy"],
        "gender_rate": 50, "rarity": "rare", "gen": 1, "egg_steps": 400,
        "sprite": "sprites/pokemon/base/26.png",
    },
    {
        "id": 280, "name": "Ralts", "egg_group": ["humanshape", "amorphous"],
        "gender_rate": 50, "rarity": "rare", "gen": 3, "egg_steps": 1280,
        "egg_sprite": "sprites/eggs/psychic.png",
        "sprite": "sprites/pokemon/base/280.png",
        "evolutions": [{"evolves_to": "Kirlia", "method": ["level"], "value": 20}],
    },
    {
        "id": 281, "name": "Kirlia", "egg_group": ["humanshape", "amorphous"],
        "gender_rate": 50, "rarity": "rare", "gen": 3, "egg_steps": 1280,
        "sprite": "sprites/pokemon/base/281.png",
        "evolutions": [
            {"evolves_to": "Gallade", "method": ["level", "gender"], "value": 30, "value_2": "M"},
        ],
    },
    {
        "id": 475, "name": "Gallade", "egg_group": ["humanshape", "amorphous"],
        "gender_rate": 100, "rarity": "special", "gen": 4, "egg_steps": 1280,
        "sprite": "sprites/pokemon/base/475.png",
    },
]


def define_game() -> GameDefinition:
    return GameDefinition(
        config=GameConfig(name="Kanto Hatchery"),
        balance=Balance(),
        species=SpeciesTable.from_records(SPECIES),
    )
