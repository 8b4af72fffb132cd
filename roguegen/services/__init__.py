"""Spawn engines and the guarantee repair pass.

Modules are imported directly (``from roguegen.services.item_spawn import
ItemSpawnService``); this package init stays empty so the dungeon pipeline
and the services can import each other's modules without a cycle.
"""
