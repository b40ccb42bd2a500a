"""Publisher interface shared by all publishing formats."""

from .base import PreparedMod, Publisher, PublishResult

__all__ = ["PreparedMod", "PublishResult", "Publisher"]
