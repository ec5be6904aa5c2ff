"""Microblogging API: users, microposts and feeds."""

__version__ = "0.1.0"
