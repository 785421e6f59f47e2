"""Matplotlib-based preview display for rendered images.

Example:
    >>> from minitrace.preview.display import show_preview
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from minitrace.core.frame import FrameRenderer


def prepare_for_display(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float64]:
    """Clamp a linear color image of shape (H, W, 3) to [0, 1] for imshow.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    array = np.asarray(image, dtype=np.float64)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    return np.clip(array, 0.0, 1.0)


def show_image(
    image: npt.NDArray[np.floating],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a color image in a Matplotlib window.

    Args:
        image: Linear color array of shape (H, W, 3).
        title: Figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = prepare_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image, interpolation="nearest")
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_preview(
    renderer: FrameRenderer,
    *,
    title: str | None = None,
    block: bool = True,
) -> None:
    """Display the renderer's finished frame.

    The default title shows the image size.
    """
    if title is None:
        title = f"Render Preview - {renderer.width}x{renderer.height}"
    show_image(renderer.get_image_numpy(), title=title, block=block)
