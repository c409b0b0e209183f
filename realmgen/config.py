"""
Configuration constants.

Centralizes all magic numbers and configuration values used by the map
generators. Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# Master seed for query-time random streams (rng.get(...)). Map generation
# never reads it: every generate_map() call seeds its own stream.
# RANDOM_SEED = None
RANDOM_SEED = "realmgen"

# =============================================================================
# MAP DEFAULTS
# =============================================================================

DEFAULT_MAP_TYPE = "dungeon"
DEFAULT_DIFFICULTY = "normal"

DEFAULT_MAP_WIDTH = 100
DEFAULT_MAP_HEIGHT = 100
DEFAULT_TILE_SIZE = 32  # Pixels per tile, carried through for renderers
DEFAULT_NOISE_SCALE = 0.1

DEFAULT_ROOM_MIN_SIZE = 5
DEFAULT_ROOM_MAX_SIZE = 15
DEFAULT_ROOM_COUNT = 10

DEFAULT_ENEMY_DENSITY = 0.05
DEFAULT_CHEST_DENSITY = 0.02
DEFAULT_OBSTACLE_DENSITY = 0.01
DEFAULT_WALL_DENSITY = 0.015
DEFAULT_NPC_DENSITY = 0.01

# =============================================================================
# WALKABILITY
# =============================================================================

# A tile is walkable only if it is FLOOR and at least this high.
WALKABLE_MIN_HEIGHT = 0.3

# =============================================================================
# DIFFICULTY
# =============================================================================

# Density multipliers per difficulty. Missing keys mean 1.0.
DIFFICULTY_DENSITY_MULTIPLIERS: dict[str, dict[str, float]] = {
    "normal": {},
    "nightmare": {"enemy": 1.5, "obstacle": 1.2},
    "hell": {"enemy": 2.5, "obstacle": 1.5, "chest": 1.3},
}

# Inclusive enemy level range per difficulty.
DIFFICULTY_LEVEL_RANGES: dict[str, tuple[int, int]] = {
    "normal": (1, 30),
    "nightmare": (30, 60),
    "hell": (60, 100),
}

# Probability that a regular enemy spawn is promoted to an elite.
DIFFICULTY_ELITE_CHANCE: dict[str, float] = {
    "normal": 0.05,
    "nightmare": 0.15,
    "hell": 0.25,
}

# (min multiplier, max multiplier) applied to the tier range, then floored.
ELITE_LEVEL_SCALE = (1.5, 1.2)
BOSS_LEVEL_SCALE = (2.0, 1.5)

# =============================================================================
# MAP TYPE MULTIPLIERS
# =============================================================================

MAP_TYPE_DENSITY_MULTIPLIERS: dict[str, dict[str, float]] = {
    "dungeon": {"chest": 1.5, "obstacle": 0.7, "enemy": 1.2},
    "field": {"chest": 1.0, "obstacle": 1.3, "enemy": 0.8},
    # Arena enemies are a fixed boss encounter, not density driven.
    "arena": {"chest": 0.5, "obstacle": 0.5, "enemy": 0.0},
    "town": {"chest": 0.1, "obstacle": 0.2, "enemy": 0.1},
}

# Placed obstacles are raised to at least this height.
OBSTACLE_MIN_HEIGHT: dict[str, float] = {
    "dungeon": 0.4,
    "field": 0.4,
    "arena": 0.35,
    "town": 0.4,
}

# =============================================================================
# DUNGEON
# =============================================================================

ROOM_PLACEMENT_ATTEMPTS_PER_ROOM = 10
ROOM_PADDING = 1
EXTRA_CORRIDOR_FRACTION = 0.3  # floor(rooms * fraction) extra loop corridors
DUNGEON_PILLAR_FACTOR = 1.3 * 0.5  # Multiplied by wall_density

DUNGEON_FLOOR_HEIGHT = (0.4, 0.1)  # (base, noise amplitude)
DUNGEON_FLOOR_HEIGHT_RANGE = (0.3, 0.5)
DUNGEON_WALL_HEIGHT = (0.8, 0.2)
DUNGEON_WALL_HEIGHT_RANGE = (0.6, 1.0)

# =============================================================================
# FIELD
# =============================================================================

FIELD_WATER_THRESHOLD = 0.3  # Terrain height below this becomes water
FIELD_MOUNTAIN_THRESHOLD = 0.75  # Terrain height above this becomes wall
FIELD_DETAIL_FREQUENCY = 4.0  # Detail octave frequency multiplier
FIELD_DETAIL_WEIGHT = 0.2

FIELD_FOREST_COUNT = (3, 8)
FIELD_FOREST_RADIUS = (5, 19)
FIELD_FOREST_DENSITY = (0.6, 0.9)
FIELD_TREE_HEIGHT = (0.6, 0.9)
FIELD_FOREST_FLOOR_HEIGHT = (0.4, 0.5)

FIELD_LAKE_COUNT = (1, 4)
FIELD_LAKE_SIZE = (8, 22)
FIELD_LAKE_STRETCH = 1.5  # Horizontal elongation of the lake ellipse

FIELD_PATH_COUNT = (2, 6)
FIELD_PATH_WIDTH = (1, 2)

FIELD_ROCK_CHANCE = 0.3  # Natural obstacle is a rock (WALL) instead of a bush
FIELD_ROCK_HEIGHT = (0.6, 0.8)
FIELD_BUSH_HEIGHT = (0.5, 0.6)

# =============================================================================
# ARENA
# =============================================================================

ARENA_RADIUS_FRACTION = 0.4  # Of min(width, height)
ARENA_BUFFER_WIDTH = 5
ARENA_PILLAR_COUNT = (4, 11)
ARENA_PILLAR_DISTANCE = (0.3, 0.8)  # Fraction of the arena radius
ARENA_PILLAR_SIZE = (1, 2)
ARENA_PILLAR_WALL_CHANCE = 0.7
ARENA_COVER_WALL_FACTOR = 1.5  # Cover walls per pillar
ARENA_COVER_WALL_DISTANCE = (0.4, 0.8)
ARENA_ALTAR_FRACTION = 0.15  # Of the arena radius
ARENA_ENTRANCE_LENGTH = 10

# =============================================================================
# TOWN
# =============================================================================

TOWN_BUILDING_COUNT = (5, 14)
TOWN_BUILDING_SIZE = (5, 9)
TOWN_BUILDING_DISTANCE = (0.2, 0.9)  # Fraction of TOWN_RADIUS_FRACTION * min
TOWN_RADIUS_FRACTION = 0.4
TOWN_SHOP_COUNT = 3
TOWN_FURNITURE_CHANCE = 0.08
TOWN_PLAZA_FRACTION = 0.15
TOWN_PERIMETER_FRACTION = 0.45
TOWN_PERIMETER_STEP = 0.01  # Radians between perimeter samples
TOWN_GATE_HALF_WIDTH = 0.1  # Radians either side of a cardinal direction
TOWN_FOUNTAIN_RADIUS = 3
TOWN_DECORATION_COUNT = (10, 25)
TOWN_DECORATION_DISTANCE = (0.1, 0.9)
TOWN_ROAD_WIDTH = (1, 2)
TOWN_EXTRA_ROAD_FRACTION = 0.5

TOWN_GROUND_HEIGHT = 0.4
TOWN_WALL_HEIGHT = 0.7
TOWN_INTERIOR_HEIGHT = 0.5
TOWN_PERIMETER_HEIGHT = 0.8
TOWN_DECORATION_HEIGHT = 0.6

# =============================================================================
# ENTITIES
# =============================================================================

ENEMY_POOLS: dict[str, tuple[str, ...]] = {
    "dungeon": ("skeleton", "zombie", "ghost", "spider", "slime"),
    "field": ("wolf", "bandit", "goblin", "troll", "ogre"),
    "town": ("thief", "drunkard", "rat", "stray_dog"),
}
DEFAULT_ENEMY_POOL = ("goblin", "orc", "troll", "skeleton")

ENEMY_GROUP_COUNT = (3, 7)
ENEMY_GROUP_SIZE = (3, 6)
ENEMY_GROUP_SPREAD = (1, 3)

ARENA_ELITE_COUNT = (4, 7)
ARENA_ELITE_DISTANCE = (5.0, 10.0)
ARENA_ELITE_PLACEMENT_ATTEMPTS = 30

# =============================================================================
# NPCS
# =============================================================================

SHOP_NPC_KINDS = ("blacksmith", "merchant", "alchemist", "jeweler", "armorer")
SHOP_KINDS = ("weapon", "armor", "potion", "general", "magic")
SHOP_ITEM_COUNT = (5, 14)
SHOP_ITEM_PRICE = (10, 1009)

REGULAR_NPC_KINDS = ("villager", "guard", "child", "elder", "noble", "beggar", "bard")
ROOM_NPC_CHANCE = 0.7
DIALOGUE_LINE_COUNT = (2, 5)

SHOP_DIALOGUE = (
    "Welcome! Looking for something?",
    "We have fine goods in stock.",
    "How about this one at a special price?",
)

TOWN_DIALOGUE = (
    "Nice weather today.",
    "This town has always been peaceful.",
    "Rumor says strange sounds come from the nearby forest.",
    "An adventurer? Wonderful!",
    "Have you come from far away?",
    "Dangerous monsters appear in the eastern mountains. Be careful.",
    "Legend says treasure sleeps in the southern cave.",
    "The mayor hasn't shown himself lately. I wonder what happened?",
    "The merchants' guild is on the north side.",
    "Packs of wolves have been seen in the western forest lately.",
)

# =============================================================================
# PATHFINDING
# =============================================================================

RANDOM_POSITION_ATTEMPTS = 100
RANDOM_POSITION_CENTER_WINDOW = 5  # Half-size of the fallback scan window
