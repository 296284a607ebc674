from .particle import GLYPHS, Particle, Position, Velocity
from .world import World, create

__all__ = ["GLYPHS", "Particle", "Position", "Velocity", "World", "create"]
