"""Game domain services: motion, hit resolution, admission and broadcast.

This package contains the game mechanics that HTTP routes and socket
handlers call into, keeping transport concerns separated from the
authoritative game state.
"""
