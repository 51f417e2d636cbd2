"""
Banana Client Shared Kernel
===========================

Session and network logic shared by every Banana front end.

Architecture:
- core: EventBus, errors, configuration, service registry
- infrastructure: Technical adapters (backend HTTP, key-value persistence)
- domain: Session Store, auth gateway, logout, leaderboard
"""

__version__ = "0.3.0"

__all__ = []
