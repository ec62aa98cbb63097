from .window import validate_shift_window

__all__ = ["validate_shift_window"]
