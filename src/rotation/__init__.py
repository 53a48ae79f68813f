"""Court rotation engine: match formation and court/queue lifecycle."""
from .engine import RotationEngine
from .models import Court, Location, Player

__all__ = ['RotationEngine', 'Court', 'Location', 'Player']
