from .tags import setup

__all__ = ("setup",)
