from .bilateral import (
    bilateral_filter_vectorized,
    check_image,
    filter_pixel,
    filter_rows,
    quantize,
    window_bounds,
)

__all__ = [
    "bilateral_filter_vectorized",
    "check_image",
    "filter_pixel",
    "filter_rows",
    "quantize",
    "window_bounds",
]
