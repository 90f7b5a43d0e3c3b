from .batch import Batch
from .movement import Movement

__all__ = ["Batch", "Movement"]
