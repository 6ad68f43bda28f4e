"""Config package."""

from easyhttp.config.settings import ClientSettings

__all__ = ["ClientSettings"]
