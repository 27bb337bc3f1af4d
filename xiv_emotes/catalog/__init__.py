"""FFXIV Emote Catalog Sync.

This package keeps the emotes table in step with the game's Emote sheet
as served by XIVAPI.

Usage:
    python -m xiv_emotes.catalog                    # Sync using config.json
    python -m xiv_emotes.catalog --config X.json    # Custom config
"""
