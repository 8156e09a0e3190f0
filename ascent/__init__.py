"""
Ascent - Tower-building strategy game engine

Players move workers around a grid of towers and build floors; a worker
standing on a level-3 tower wins. The engine provides:
- Board, tower and worker model
- Move/build legality and the per-turn phase machine
- Pluggable player powers and board modifiers (standard, chaos)
- Plain-text save files
- An HTTP adapter and a small CLI
"""

__version__ = "0.1.0"
