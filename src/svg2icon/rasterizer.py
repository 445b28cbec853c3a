from __future__ import annotations

import io
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, UnidentifiedImageError


logger = logging.getLogger(__name__)

RenderEngine = Callable[[Path, int], bytes]
EngineLoader = Callable[[], RenderEngine]


# Every Rasterizer in the process renders through this lock.
_RENDER_LOCK = threading.Lock()


class RenderError(Exception):
    pass


class RasterizerUnavailableError(RenderError):
    """Raised when the rendering engine could not be initialised."""


def _load_cairosvg() -> RenderEngine:
    try:
        import cairosvg  # type: ignore
    except (ImportError, OSError) as exc:
        # OSError: the package is installed but libcairo is not.
        raise RasterizerUnavailableError(
            f"CairoSVG is not available: {exc}"
        ) from exc

    def render(source: Path, pixel_size: int) -> bytes:
        return cairosvg.svg2png(
            url=str(source),
            output_width=pixel_size,
            output_height=pixel_size,
        )

    return render


def _png_dimensions(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as image:
        if image.format != "PNG":
            raise RenderError(f"Engine returned {image.format} data instead of PNG")
        return image.size


class Rasterizer:
    """Serialised access to a lazily initialised SVG rendering engine.

    The engine is loaded on first use. If loading fails, the failure is
    remembered and every later call raises it again.
    """

    def __init__(self, engine_loader: Optional[EngineLoader] = None) -> None:
        self._engine_loader = engine_loader or _load_cairosvg
        self._engine: Optional[RenderEngine] = None
        self._init_error: Optional[RasterizerUnavailableError] = None

    def _ensure_engine(self) -> RenderEngine:
        if self._init_error is not None:
            raise self._init_error
        if self._engine is None:
            try:
                self._engine = self._engine_loader()
            except RasterizerUnavailableError as exc:
                self._init_error = exc
                raise
            except Exception as exc:
                self._init_error = RasterizerUnavailableError(
                    f"Failed to initialise renderer: {exc}"
                )
                raise self._init_error from exc
            logger.debug("Rendering engine initialised")
        return self._engine

    def render(self, source: Path, pixel_size: int) -> bytes:
        if pixel_size <= 0:
            raise ValueError(f"pixel_size must be positive, got {pixel_size}")

        with _RENDER_LOCK:
            engine = self._ensure_engine()
            try:
                data = engine(Path(source), pixel_size)
            except Exception as exc:
                raise RenderError(
                    f"Failed to render {source} at {pixel_size}px: {exc}"
                ) from exc

        if not data:
            raise RenderError(f"Renderer returned no data for {source} at {pixel_size}px")
        try:
            size = _png_dimensions(data)
        except (UnidentifiedImageError, OSError) as exc:
            raise RenderError(
                f"Renderer returned unreadable image for {source} at {pixel_size}px"
            ) from exc
        if size != (pixel_size, pixel_size):
            raise RenderError(
                f"Renderer produced {size[0]}x{size[1]} for a {pixel_size}px request"
            )

        logger.debug("Rendered %s at %dpx (%d bytes)", source, pixel_size, len(data))
        return data


_shared_rasterizer = Rasterizer()


def shared_rasterizer() -> Rasterizer:
    return _shared_rasterizer
