"""
Convert OpenStreetMap-style tile directories into MBTiles archives.
"""

__version__ = "1.1.0"

MBTILES_VERSION = "1.1"
