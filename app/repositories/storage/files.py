"""Temp file store - per-page chart configs and chart data under TEMP_DIR."""

import gzip
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from app.errors import NotFoundError, StorageError
from settings import TEMP_DIR

SUMMARY_FILE = "_summary.json"


def _gzip(path: Path, gz_path: Path, level: int = 9) -> None:
    gz_path.write_bytes(gzip.compress(path.read_bytes(), compresslevel=level))


class TempFileStore:
    """`{root}/chart-configs/{page}.json` and `{root}/chart-data/{page}.json[.gz]`."""

    def __init__(self, root: Path = TEMP_DIR):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def configs_dir(self) -> Path:
        return self._root / "chart-configs"

    @property
    def data_dir(self) -> Path:
        return self._root / "chart-data"

    @staticmethod
    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        return path

    def write_page_configs(self, page_id: str, charts: list[dict]) -> Path:
        return self._write(self.configs_dir / f"{page_id}.json", {"pageId": page_id, "charts": charts})

    def config_pages(self) -> list[str]:
        """Page ids that have an exported config file."""
        if not self.configs_dir.exists():
            return []
        return sorted(p.stem for p in self.configs_dir.glob("*.json") if not p.name.startswith("_"))

    def read_page_configs(self, page_id: str) -> dict:
        path = self.configs_dir / f"{page_id}.json"
        if not path.exists():
            raise NotFoundError(f"No config file for page {page_id}")
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise StorageError(f"Invalid JSON in {path.name}: {e}") from e

    def write_page_data(self, page_id: str, data: dict) -> Path:
        return self._write(self.data_dir / f"{page_id}.json", data)

    def read_page_data(self, page_id: str) -> tuple[dict, bool]:
        """(page data, served-from-gzip). Prefers the compressed file."""
        gz_path = self.data_dir / f"{page_id}.json.gz"
        json_path = self.data_dir / f"{page_id}.json"

        if gz_path.exists():
            try:
                raw = gzip.decompress(gz_path.read_bytes())
            except (OSError, EOFError) as e:
                raise StorageError("Failed to decompress data") from e
            compressed = True
        elif json_path.exists():
            raw = json_path.read_bytes()
            compressed = False
        else:
            logger.info("No data found for page {}", page_id)
            raise NotFoundError("Page data not found")

        try:
            return json.loads(raw.decode("utf-8")), compressed
        except ValueError as e:
            raise StorageError("Invalid JSON data") from e

    def write_summary(self, summary: dict) -> Path:
        return self._write(self.data_dir / SUMMARY_FILE, summary)

    def read_summary(self) -> dict | None:
        path = self.data_dir / SUMMARY_FILE
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def stamp_summary(self, **fields: Any) -> bool:
        """Merge fields into `_summary.json` and its `.gz` copy; False if there is no summary yet."""
        summary = self.read_summary()
        if summary is None:
            return False
        summary.update(fields)
        path = self.write_summary(summary)
        gz_path = path.with_name(path.name + ".gz")
        if gz_path.exists():
            _gzip(path, gz_path)
        return True

    def compress_all(self, level: int = 9) -> list[Path]:
        """Write a `.gz` sibling for every JSON file in both trees."""
        written = []
        for folder in (self.data_dir, self.configs_dir):
            if not folder.exists():
                continue
            for path in sorted(folder.glob("*.json")):
                gz_path = path.with_name(path.name + ".gz")
                _gzip(path, gz_path, level)
                logger.debug("Compressed {} ({} -> {} bytes)", path.name, path.stat().st_size, gz_path.stat().st_size)
                written.append(gz_path)
        return written

    def check(self) -> dict:
        """Inventory of both trees."""

        def files(folder: Path) -> list[Path]:
            return sorted(p for p in folder.iterdir() if p.is_file()) if folder.exists() else []

        data_files = files(self.data_dir)
        config_files = files(self.configs_dir)
        total = sum(p.stat().st_size for p in data_files + config_files)
        pages = sorted({p.name.split(".")[0] for p in data_files if not p.name.startswith("_")})

        return {
            "chartDataExists": self.data_dir.exists(),
            "chartConfigsExists": self.configs_dir.exists(),
            "chartDataFiles": len(data_files),
            "chartConfigFiles": len(config_files),
            "pages": pages,
            "totalSize": f"{total / (1024 * 1024):.2f}MB",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
