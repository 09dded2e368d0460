"""Relay messages from monitored Discord channels to subscribers' DMs."""

__version__ = "0.1.0"
