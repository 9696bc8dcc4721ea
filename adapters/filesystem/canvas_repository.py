from __future__ import annotations

from pathlib import Path
from typing import Any, List

import orjson

from domain.models import CanvasDocument
from domain.ports.repositories import CanvasRepository


def load_json(path: Path) -> dict[str, Any]:
    data = orjson.loads(path.read_bytes())
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}"
        raise TypeError(msg)
    return data


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
    tmp_path.replace(path)


class FileSystemCanvasRepository(CanvasRepository):
    def load(self, path: Path) -> CanvasDocument:
        return CanvasDocument.model_validate(load_json(path))

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, CanvasDocument]]:
        return [(path, self.load(path)) for path in sorted(directory.glob("*.json"))]

    def save(self, document: CanvasDocument, path: Path) -> None:
        write_json_atomic(path, document.to_payload())
