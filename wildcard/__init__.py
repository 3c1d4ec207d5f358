"""
Wildcard - Shedding card game session engine

Runs multiplayer sessions of a colour-matching card game and provides:
- Session lifecycle (create, join, ready, start, abandon)
- Turn order with skip and reverse
- Card effects and the win check
- A REST API over the session manager
"""

__version__ = "0.1.0"
