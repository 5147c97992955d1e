from .color import LUMA_WEIGHTS, intensity

__all__ = ["LUMA_WEIGHTS", "intensity"]
