from __future__ import annotations

# =============================================================================
# TILE-BASED COORDINATE SYSTEMS (Always integers)
# =============================================================================


TileCoord = int  # Always integer tile position

# Map coordinates - absolute positions on a generated map.
# x is the column, y is the row.
WorldTileCoord = TileCoord  # Example: x=5, y=3
WorldTilePos = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on map

# Ordered list of tiles from one position to another, both ends included.
TilePath = list[WorldTilePos]

# =============================================================================
# GENERATION-RELATED TYPES
# =============================================================================

# Height values live in [0.0, 1.0]. Tiles below the walkable threshold
# (config.WALKABLE_MIN_HEIGHT) are never walkable.
TileHeight = float

# Seeds accepted by the random streams. Strings are hashed with crc32,
# None draws a fresh seed from system entropy.
RandomSeed = int | str | None
