"""Expose Bank State: serve the bank interface open/closed flag on 127.0.0.1 for overlays."""

from bankstate.plugin import BankStatePlugin

__all__ = ["BankStatePlugin"]
