"""
Virtual match engine: a deterministic table-tennis match that every viewer
replays identically from a time-derived seed, plus the pong-style animation
that follows it.
"""
