"""Room domain services: registry, lifecycle, auto-start and reset timers.

Socket handlers and HTTP routes import from here; nothing in this package
knows about Flask requests, only about the transport interface it is given.
"""

from .registry import RoomRegistry
from .coordinator import RoomCoordinator
from .scheduler import BackgroundScheduler, TimerHandle

__all__ = ['RoomRegistry', 'RoomCoordinator', 'BackgroundScheduler', 'TimerHandle']
