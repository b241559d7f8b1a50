"""
Vitrine - static retro game catalog builder

Resolves ROM dump sets, emulator binaries, artwork and media for each game in a
catalog database, reconciles them against canonical emulator metadata, and
publishes per-game manifests and HTML documents for in-browser emulation.
"""

__version__ = "0.4.0"
__author__ = "vitrine contributors"
