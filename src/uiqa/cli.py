"""Typer CLI: ``uiqa score``, ``scan``, ``plan``, ``generate`` and ``validate``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from uiqa.config import load_config
from uiqa.schemas.analysis import ComplexityLevel, ComponentType
from uiqa.schemas.config import QualityConfig
from uiqa.schemas.orchestration import GenerationRequest
from uiqa.schemas.quality import QualityReport, Severity

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="uiqa",
    help="UI component quality assurance: score generated React/Tailwind components and steer generation.",
    no_args_is_help=True,
)
console = Console()

_SEVERITY_STYLE = {Severity.ERROR: "red", Severity.WARNING: "yellow", Severity.INFO: "blue"}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> QualityConfig:
    if config is None:
        return QualityConfig()
    try:
        return load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _print_report(report: QualityReport, title: str) -> None:
    s = report.quality_score
    table = Table(title=f"{title}: overall {s.overall}/100", show_header=True)
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_row("Code quality", str(s.code_quality))
    table.add_row("Accessibility", str(s.accessibility))
    table.add_row("Design consistency", str(s.design_consistency))
    table.add_row("Performance", str(s.performance))
    console.print(table)

    for e in report.errors:
        where = f"L{e.line} " if e.line is not None else ""
        style = _SEVERITY_STYLE[e.severity]
        console.print(f"  [{style}]{e.severity.value:<7}[/] {where}[dim]{e.rule or e.type.value}[/] {e.message}")
    for rec in report.recommendations:
        console.print(f"  [cyan]→[/] {rec}")


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to uiqa-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Default provider:   {cfg.default_provider.value}")
    for provider, settings in cfg.providers.items():
        console.print(f"    - {provider.value}: {settings.model} (key: ${settings.api_key_env})")
    console.print(f"  Cold-start cutoff:  {cfg.min_provider_generations} generations")
    console.print(f"  Success threshold:  {cfg.success_threshold}")
    console.print(f"  TS error allowance: {cfg.typescript_error_allowance}")
    console.print(f"  Timeout:            {cfg.generation_timeout:.0f}s")
    console.print(f"  Output dir:         {cfg.output_directory}")


@app.command()
def score(
    file: Path = typer.Argument(..., help="Component source file (.tsx/.jsx)"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to uiqa-config.yml"),
    markdown: Path = typer.Option(None, "--markdown", "-m", help="Also write a Markdown report to this path."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Score one component file."""
    from uiqa.output.markdown import render_markdown_report
    from uiqa.scoring.scorer import QualityScorer

    _setup_logging(verbose)
    cfg = _load(config)
    if not file.is_file():
        console.print(f"[red]Not a file:[/] {file}")
        raise typer.Exit(code=1)

    scorer = QualityScorer(typescript_error_allowance=cfg.typescript_error_allowance)
    report = scorer.score(file.read_text(encoding="utf-8", errors="replace"))
    _print_report(report, file.name)

    if markdown:
        markdown.parent.mkdir(parents=True, exist_ok=True)
        markdown.write_text(render_markdown_report(report, title=file.name))
        console.print(f"\n[green]Markdown report written to:[/] {markdown}")


@app.command()
def scan(
    directory: Path = typer.Argument(..., help="Directory to scan for components"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to uiqa-config.yml"),
    min_score: int = typer.Option(0, "--min-score", help="Exit with code 1 if any file scores below this."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Score every component under a directory (respects .gitignore)."""
    from uiqa.output.markdown import render_scan_summary
    from uiqa.scoring.scorer import QualityScorer
    from uiqa.shared.progress import ScanProgress
    from uiqa.shared.source_reader import ComponentSourceReader

    _setup_logging(verbose)
    cfg = _load(config)
    try:
        reader = ComponentSourceReader(directory)
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1)

    files = reader.component_files()
    scorer = QualityScorer(typescript_error_allowance=cfg.typescript_error_allowance)
    results: dict[str, QualityReport] = {}

    with ScanProgress(len(files)) as progress:
        for path in files:
            name = reader.relative(path)
            progress.start_file(name)
            try:
                report = scorer.score(reader.read(path))
            except OSError as exc:
                progress.fail_file(name, str(exc))
                continue
            results[name] = report
            progress.finish_file(name, report.quality_score.overall)

    out_dir = Path(cfg.output_directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "quality-scan.md"
    out_path.write_text(render_scan_summary(results))
    console.print(f"\n[green]Scan summary written to:[/] {out_path}")

    failing = [name for name, r in results.items() if r.quality_score.overall < min_score]
    if failing:
        console.print(f"[red]{len(failing)} file(s) below {min_score}[/]")
        raise typer.Exit(code=1)


@app.command()
def plan(
    prompt: str = typer.Option(..., "--prompt", "-p", help="Natural-language component request"),
    component_type: ComponentType = typer.Option(None, "--type", help="Override the detected component type."),
    complexity: ComplexityLevel = typer.Option(None, "--complexity", help="Override the detected complexity."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to uiqa-config.yml"),
    show_prompts: bool = typer.Option(False, "--show-prompts", help="Print the augmented system and user prompts."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show which strategy and provider a request would use."""
    from uiqa.orchestration.service import OrchestrationService
    from uiqa.shared.generation_client import DryRunGenerationClient

    _setup_logging(verbose)
    cfg = _load(config)
    service = OrchestrationService(DryRunGenerationClient(), config=cfg)
    request = GenerationRequest(prompt=prompt, component_type=component_type, complexity_level=complexity)
    generation_plan = service.plan(service.build_context(request))

    ctx = generation_plan.context
    console.print(f"[bold]Component type:[/] {ctx.component_type.value}")
    console.print(f"[bold]Complexity:[/]     {ctx.complexity_level.value}")
    console.print(f"[bold]Strategy:[/]       {generation_plan.strategy_id.value}")
    console.print(f"[bold]Provider:[/]       {generation_plan.provider.value}")
    if show_prompts:
        console.print("\n[bold]── System prompt ──[/]")
        console.print(generation_plan.prompt.system_prompt, markup=False)
        console.print("\n[bold]── User prompt ──[/]")
        console.print(generation_plan.prompt.user_prompt, markup=False)


@app.command()
def generate(
    prompt: str = typer.Option(..., "--prompt", "-p", help="Natural-language component request"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to uiqa-config.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use a canned component (no API calls)."),
) -> None:
    """Generate a component, score it, and write it to the output directory."""
    _setup_logging(verbose)
    cfg = _load(config)
    if dry_run:
        console.print("[yellow]DRY-RUN mode: no API calls will be made.[/]\n")
    asyncio.run(_run_generate(cfg, prompt, dry_run=dry_run))


async def _run_generate(cfg: QualityConfig, prompt: str, *, dry_run: bool = False) -> None:
    from uiqa.errors import GenerationTimeoutError
    from uiqa.orchestration.service import OrchestrationService
    from uiqa.output.markdown import render_markdown_report

    if dry_run:
        from uiqa.shared.generation_client import DryRunGenerationClient
        client = DryRunGenerationClient()
    else:
        from uiqa.shared.generation_client import OpenAIGenerationClient
        client = OpenAIGenerationClient(cfg)

    service = OrchestrationService(client, config=cfg)
    try:
        outcome = await service.generate(GenerationRequest(prompt=prompt))
    except GenerationTimeoutError as exc:
        console.print(f"[red]Generation timed out:[/] {exc}")
        raise typer.Exit(code=1)

    console.print(
        f"[bold]{outcome.name}[/] via {outcome.plan.provider.value} "
        f"({outcome.plan.strategy_id.value} strategy)\n"
    )
    _print_report(outcome.report, outcome.name)

    out_dir = Path(cfg.output_directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    code_path = out_dir / f"{outcome.component_id}.tsx"
    code_path.write_text(outcome.code)
    md_path = out_dir / f"{outcome.component_id}.md"
    md_path.write_text(render_markdown_report(outcome.report, title=outcome.name))
    console.print(f"\n[green]Component written to:[/] {code_path}")
    console.print(f"[green]Markdown report written to:[/] {md_path}")
