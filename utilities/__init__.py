from . import _types, authorization, config
from .base import BaseCog, BaseView

__all__ = (
    "BaseCog",
    "BaseView",
    "_types",
    "authorization",
    "config",
)
