"""Peer Verification Assignment & Deadline Lifecycle Engine."""

__version__ = "0.1.0"
