"""Relay notifications to chat/webhook services and collect answers to questions."""

__version__ = "1.1.0"
