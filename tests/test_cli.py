"""Tests for the Typer CLI."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from uiqa.cli import app
from uiqa.config import load_config

runner = CliRunner()


class TestValidateCommand:
    def test_valid_config(self, tmp_config: Path) -> None:
        result = runner.invoke(app, ["validate", "--config", str(tmp_config)])
        assert result.exit_code == 0
        assert "Config is valid!" in result.output
        assert "openai" in result.output

    def test_invalid_config(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("success_threshold: 500\n")
        result = runner.invoke(app, ["validate", "--config", str(bad)])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output


class TestScoreCommand:
    def test_scores_file(self, tmp_path: Path, clean_component: str) -> None:
        component = tmp_path / "ProfileCard.tsx"
        component.write_text(clean_component)
        report = tmp_path / "reports" / "profile.md"

        result = runner.invoke(app, ["score", str(component), "--markdown", str(report)])

        assert result.exit_code == 0
        assert "ProfileCard.tsx" in result.output
        assert report.read_text().startswith("# Quality Report: ProfileCard.tsx")

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["score", str(tmp_path / "Nope.tsx")])
        assert result.exit_code == 1


class TestScanCommand:
    def _project(self, tmp_path: Path, clean_component: str) -> Path:
        root = tmp_path / "app"
        (root / "components").mkdir(parents=True)
        (root / "components" / "ProfileCard.tsx").write_text(clean_component)
        (root / "components" / "Gallery.tsx").write_text('<img src="a.png" />')
        return root

    def test_writes_summary(self, tmp_path: Path, tmp_config: Path, clean_component: str) -> None:
        root = self._project(tmp_path, clean_component)
        result = runner.invoke(app, ["scan", str(root), "--config", str(tmp_config)])

        assert result.exit_code == 0
        summary = Path(load_config(tmp_config).output_directory) / "quality-scan.md"
        text = summary.read_text()
        assert "`components/ProfileCard.tsx`" in text
        assert "`components/Gallery.tsx`" in text

    def test_min_score_gate(self, tmp_path: Path, tmp_config: Path, clean_component: str) -> None:
        root = self._project(tmp_path, clean_component)
        result = runner.invoke(app, ["scan", str(root), "--config", str(tmp_config), "--min-score", "101"])
        assert result.exit_code == 1

    def test_not_a_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1


class TestPlanCommand:
    def test_plan(self) -> None:
        result = runner.invoke(app, ["plan", "--prompt", "A login form"])
        assert result.exit_code == 0
        assert "form" in result.output
        assert "quality-first" in result.output
        assert "vercel" in result.output

    def test_overrides_and_prompts(self) -> None:
        result = runner.invoke(
            app,
            ["plan", "--prompt", "Anything", "--type", "layout", "--complexity", "complex", "--show-prompts"],
        )
        assert result.exit_code == 0
        assert "layout" in result.output
        assert "user-experience" in result.output
        assert "LAYOUT COMPONENT GUIDELINES" in result.output
        assert "COMPLEX COMPONENT FOCUS" in result.output
        assert "USER EXPERIENCE REQUIREMENTS" in result.output


class TestGenerateCommand:
    def test_dry_run_writes_component_and_report(self, tmp_config: Path) -> None:
        result = runner.invoke(app, ["generate", "--prompt", "A status card", "--config", str(tmp_config), "--dry-run"])

        assert result.exit_code == 0
        assert "StatusCard" in result.output
        out_dir = Path(load_config(tmp_config).output_directory)
        [tsx] = list(out_dir.glob("comp_*.tsx"))
        assert "StatusCard" in tsx.read_text()
        assert tsx.with_suffix(".md").exists()
