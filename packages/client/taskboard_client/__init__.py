"""
Taskboard client

Talks to the Taskboard API, keeps an in-memory mirror of the signed-in user's
members and tasks, and persists the session token between runs.
"""

__version__ = "0.1.0"
