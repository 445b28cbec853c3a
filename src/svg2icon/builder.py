from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .file_ops import WriteError, write_atomic
from .icns import build_icns_bytes
from .ico import build_ico_bytes
from .rasterizer import Rasterizer, RenderError, shared_rasterizer
from .sizes import ConfigurationError


logger = logging.getLogger(__name__)

BuildError = (RenderError, ConfigurationError, WriteError)


def _build(
    encoder: Callable[[Path, Rasterizer], bytes],
    source: Path,
    destination: Path,
    rasterizer: Optional[Rasterizer],
) -> Path:
    source = Path(source)
    destination = Path(destination)
    data = encoder(source, rasterizer or shared_rasterizer())
    write_atomic(data, destination)
    return destination


def build_ico(
    source: Path, destination: Path, rasterizer: Optional[Rasterizer] = None
) -> Path:
    return _build(build_ico_bytes, source, destination, rasterizer)


def build_icns(
    source: Path, destination: Path, rasterizer: Optional[Rasterizer] = None
) -> Path:
    return _build(build_icns_bytes, source, destination, rasterizer)


BUILDERS: Dict[str, Callable[..., Path]] = {
    "ico": build_ico,
    "icns": build_icns,
}


@dataclass(frozen=True)
class BuildTarget:
    kind: str
    destination: Path

    def __post_init__(self) -> None:
        if self.kind not in BUILDERS:
            raise ValueError(f"Unknown container kind: {self.kind}")


@dataclass
class BuildResult:
    target: BuildTarget
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _run_target(
    source: Path, target: BuildTarget, rasterizer: Optional[Rasterizer]
) -> BuildResult:
    logger.info("Building %s → %s", target.kind.upper(), target.destination)
    try:
        BUILDERS[target.kind](source, target.destination, rasterizer)
    except BuildError as exc:
        logger.error("%s build failed: %s", target.kind.upper(), exc)
        return BuildResult(target, exc)
    except Exception as exc:
        logger.exception("%s build failed unexpectedly: %s", target.kind.upper(), exc)
        return BuildResult(target, exc)
    logger.info("%s written to %s", target.kind.upper(), target.destination)
    return BuildResult(target)


def build_targets(
    source: Path,
    targets: Sequence[BuildTarget],
    parallel: bool = True,
    rasterizer: Optional[Rasterizer] = None,
) -> List[BuildResult]:
    """Build every target; a failing target never stops the others."""
    if parallel and len(targets) > 1:
        with ThreadPoolExecutor(max_workers=len(targets)) as pool:
            futures = [
                pool.submit(_run_target, source, target, rasterizer) for target in targets
            ]
            return [future.result() for future in futures]
    return [_run_target(source, target, rasterizer) for target in targets]
