from .config import TinyMediaConfig

__all__ = ["TinyMediaConfig"]
