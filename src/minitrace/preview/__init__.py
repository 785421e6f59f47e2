"""Preview module for output and visualization.

Components:
    export: Plain PPM and PNG export
    display: Matplotlib-based preview window

Example:
    >>> from minitrace.preview import save_image, show_preview
    >>> renderer.render()
    >>> save_image(renderer.get_image_bytes(), "image.ppm")
    >>> show_preview(renderer)
"""

from minitrace.preview.display import prepare_for_display, show_image, show_preview
from minitrace.preview.export import (
    format_ppm,
    ppm_header,
    read_ppm,
    save_image,
    save_png,
    save_ppm,
    write_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_image",
    "prepare_for_display",
    # Export functions
    "ppm_header",
    "write_ppm",
    "format_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "read_ppm",
]
