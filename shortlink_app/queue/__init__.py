"""
Click queue module.
Bounded hand-off between the redirect path and the click workers.
"""

from .bounded import BoundedClickQueue
from .models import ClickEvent

__all__ = [
    "BoundedClickQueue",
    "ClickEvent",
]
