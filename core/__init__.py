from .bot import TagBot

__all__ = ("TagBot",)
