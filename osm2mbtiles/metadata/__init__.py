"""
Tileset metadata: configuration and coverage derived from tiles.
"""
