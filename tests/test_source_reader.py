"""Tests for component file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from uiqa.shared.source_reader import ComponentSourceReader


@pytest.fixture
def component_tree(tmp_path: Path) -> Path:
    """A small project with components, ignored dirs and a .gitignore."""
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "components" / "Button.tsx").write_text("export const Button = () => <button />;")
    (tmp_path / "src" / "components" / "Card.jsx").write_text("export const Card = () => <div />;")
    (tmp_path / "src" / "utils.ts").write_text("export const x = 1;")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "Vendor.tsx").write_text("<div />")
    (tmp_path / "generated").mkdir()
    (tmp_path / "generated" / "Auto.tsx").write_text("<div />")
    (tmp_path / ".gitignore").write_text("generated/\n")
    return tmp_path


class TestComponentSourceReader:
    def test_finds_components(self, component_tree: Path) -> None:
        reader = ComponentSourceReader(component_tree)
        names = [reader.relative(p) for p in reader.component_files()]
        assert names == ["src/components/Button.tsx", "src/components/Card.jsx"]

    def test_custom_extensions(self, component_tree: Path) -> None:
        reader = ComponentSourceReader(component_tree, extensions={".ts"})
        assert [p.name for p in reader.component_files()] == ["utils.ts"]

    def test_skips_oversized_files(self, component_tree: Path) -> None:
        (component_tree / "src" / "Huge.tsx").write_text("x" * (300 * 1024))
        reader = ComponentSourceReader(component_tree)
        assert "Huge.tsx" not in [p.name for p in reader.component_files()]

    def test_read(self, component_tree: Path) -> None:
        reader = ComponentSourceReader(component_tree)
        [button, _] = reader.component_files()
        assert "Button" in reader.read(button)

    def test_root_must_be_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="not a directory"):
            ComponentSourceReader(tmp_path / "missing")
