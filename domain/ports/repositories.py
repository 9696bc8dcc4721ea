from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import CanvasDocument


class CanvasRepository(Protocol):
    def load(self, path: Path) -> CanvasDocument: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, CanvasDocument]]: ...

    def save(self, document: CanvasDocument, path: Path) -> None: ...
