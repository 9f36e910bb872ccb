"""A pygame lane battle game: fish units, enemy waves, bases, data loading and tweens."""

__version__ = "0.1.0"