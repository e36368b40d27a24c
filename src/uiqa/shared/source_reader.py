"""Gitignore-aware discovery of component source files."""

from __future__ import annotations

import logging
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

# Directories that never contain hand-written components
_ALWAYS_IGNORE = {
    ".git",
    "node_modules",
    ".next",
    ".nuxt",
    "dist",
    "build",
    ".cache",
    ".turbo",
    "coverage",
    "storybook-static",
}

COMPONENT_EXTENSIONS = {".tsx", ".jsx"}

# Max file size to score (256 KB)
_MAX_FILE_SIZE = 256 * 1_024


class ComponentSourceReader:
    """Find and read component files under a root, respecting .gitignore rules."""

    def __init__(self, root: str | Path, *, extensions: set[str] | None = None) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Component root is not a directory: {self.root}")
        self.extensions = extensions or COMPONENT_EXTENSIONS
        self._spec = self._load_gitignore()

    def _load_gitignore(self) -> pathspec.PathSpec | None:
        gi = self.root / ".gitignore"
        if gi.exists():
            return pathspec.PathSpec.from_lines("gitignore", gi.read_text().splitlines())
        return None

    def _is_ignored(self, rel: Path) -> bool:
        if any(part in _ALWAYS_IGNORE for part in rel.parts):
            return True
        return bool(self._spec and self._spec.match_file(str(rel)))

    def component_files(self) -> list[Path]:
        """Component files in sorted order, skipping ignored and oversized ones."""
        files: list[Path] = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in self.extensions:
                continue
            rel = path.relative_to(self.root)
            if self._is_ignored(rel):
                continue
            if path.stat().st_size > _MAX_FILE_SIZE:
                logger.info("Skipping %s: %d bytes", rel, path.stat().st_size)
                continue
            files.append(path)
        return files

    def read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")

    def relative(self, path: Path) -> str:
        return str(path.relative_to(self.root))
