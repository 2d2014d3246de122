"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from resume_matcher.clients.llm_client import LLMClient
from resume_matcher.config import AppConfig, load_config
from resume_matcher.logging.cost_calculator import calculate_cost
from resume_matcher.logging.models import UsageLog
from resume_matcher.logging.usage_store import UsageStore
from resume_matcher.models.improvement import SectionId
from resume_matcher.models.match import MatchResult
from resume_matcher.models.resume import ResumeData, dump_resume, load_resume
from resume_matcher.parsers.jd_parser import load_jd_file
from resume_matcher.pipeline.match_analyzer import MatchAnalyzer
from resume_matcher.pipeline.orchestrator import ImprovementResult, ResumeImprover
from resume_matcher.pipeline.section_rewriter import resolve_section
from resume_matcher.prompts import PromptLibrary
from resume_matcher.templates.renderer import resume_to_text

app = typer.Typer(
    name="resume-matcher",
    help="Match a resume against a job description and rewrite it to fit.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _require_file(path: Path | None, what: str) -> None:
    if path is not None and not path.exists():
        console.print(f"[red]{what} not found: {path}[/red]")
        raise typer.Exit(1)


def _load_inputs(resume: Path, jd: Path) -> tuple[ResumeData, str]:
    _require_file(resume, "Resume file")
    _require_file(jd, "Job description file")
    try:
        return load_resume(resume), load_jd_file(jd)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid input: {e}[/red]")
        raise typer.Exit(1)


def _build_client(config: AppConfig) -> LLMClient:
    return LLMClient(
        timeout=config.llm.timeout,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        max_retries=config.llm.max_retries,
    )


def _record_usage(config: AppConfig, llm: LLMClient, log: UsageLog) -> None:
    tokens = llm.get_token_summary()
    log.total_input_tokens = tokens["input"]
    log.total_output_tokens = tokens["output"]
    log.llm_calls = len(tokens["calls"])
    log.estimated_cost_usd = calculate_cost(tokens["calls"])
    if config.usage.enabled:
        UsageStore(config.usage.resolved_db_path).save_log(log)


def _print_match(match: MatchResult) -> None:
    color = "green" if match.overall_match >= 70 else "yellow" if match.overall_match >= 40 else "red"
    lines = [f"[bold {color}]Overall match: {match.overall_match}%[/bold {color}]"]
    if match.missing_skills:
        lines.append("Missing skills: " + ", ".join(match.missing_skills))
    if match.relevant_experience.has:
        lines.append("Relevant experience: " + "; ".join(match.relevant_experience.has))
    if match.relevant_experience.missing:
        lines.append("Experience gaps: " + "; ".join(match.relevant_experience.missing))
    console.print(Panel("\n".join(lines), title="Match analysis"))
    for s in match.improvement_suggestions:
        console.print(f"  - [bold]{s.section}[/bold]: {s.improved}")


def _print_changes(before: ResumeData, result: ImprovementResult) -> None:
    if not result.changed:
        console.print("[yellow]No sections changed.[/yellow]")
        return
    table = Table(title="Changed sections")
    table.add_column("Section", style="bold")
    table.add_column("Before")
    table.add_column("After")
    for improvement in result.improvements:
        section = SectionId.parse(improvement.section)
        if section is None or improvement.is_noop or improvement.section not in result.report.applied:
            continue
        _, after = resolve_section(section, result.resume)
        _, old = resolve_section(section, before)
        if after != old:
            table.add_row(improvement.section, old, after)
    console.print(table)


@app.command()
def analyze(
    resume: Path = typer.Argument(help="Resume JSON file"),
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the match result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Score how well a resume matches a job description."""
    _setup_logging(verbose)
    resume_data, jd_text = _load_inputs(resume, jd)
    config = load_config()
    llm = _build_client(config)
    analyzer = MatchAnalyzer(llm, PromptLibrary.from_file(config.prompts.resolved_overrides_path))

    with console.status("Analyzing match..."):
        match = asyncio.run(analyzer.analyze(resume_data, jd_text))

    _print_match(match)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(match.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        console.print(f"[green]Match result saved: {output}[/green]")

    _record_usage(
        config,
        llm,
        UsageLog(mode="analyze", resume_name=resume.stem, match_score=match.overall_match),
    )


@app.command()
def improve(
    resume: Path = typer.Argument(help="Resume JSON file"),
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    match_file: Path = typer.Option(None, "--match", help="Match result JSON from `analyze`"),
    output: Path = typer.Option(None, "--output", "-o", help="Output resume JSON path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rewrite resume sections to better fit a job description."""
    _setup_logging(verbose)
    resume_data, jd_text = _load_inputs(resume, jd)
    _require_file(match_file, "Match file")
    config = load_config()
    llm = _build_client(config)
    prompts = PromptLibrary.from_file(config.prompts.resolved_overrides_path)

    prior_match: MatchResult | None = None
    if match_file:
        try:
            prior_match = MatchResult.model_validate_json(match_file.read_text(encoding="utf-8"))
        except ValidationError as e:
            console.print(f"[red]Invalid match file: {e}[/red]")
            raise typer.Exit(1)

    improver = ResumeImprover(
        llm,
        prompts,
        section_timeout=config.pipeline.section_timeout,
        default_sections=config.pipeline.default_sections,
    )

    with console.status("Improving resume...") as status:

        def on_phase(phase: str, detail: str) -> None:
            status.update(detail)

        # One event loop for every call; the client's connection pool is bound to it.
        async def _run_all() -> tuple[MatchResult, ImprovementResult]:
            current = prior_match
            if current is None:
                status.update("Analyzing match...")
                current = await MatchAnalyzer(llm, prompts).analyze(resume_data, jd_text)
                _print_match(current)
            return current, await improver.run(resume_data, jd_text, current, on_phase=on_phase)

        match, result = asyncio.run(_run_all())

    if output is None:
        output = resume.with_name(f"{resume.stem}_improved.json")
    dump_resume(result.resume, output)

    _print_changes(resume_data, result)
    if result.report.added_skills:
        console.print("Skills added: " + ", ".join(s.skill for s in result.report.added_skills))
    if not result.success:
        console.print(f"[yellow]Improvement failed, original resume kept: {result.error}[/yellow]")
    console.print(f"[green]Resume saved: {output}[/green] ({result.elapsed_seconds:.1f}s)")

    _record_usage(
        config,
        llm,
        UsageLog(
            mode="improve",
            resume_name=resume.stem,
            match_score=match.overall_match,
            sections_selected=result.sections,
            sections_improved=result.report.applied,
            skills_added=len(result.report.added_skills),
            elapsed_seconds=result.elapsed_seconds,
            success=result.success,
            error_message=result.error,
        ),
    )


@app.command()
def preview(resume: Path = typer.Argument(help="Resume JSON file")) -> None:
    """Print a resume as plain text."""
    _require_file(resume, "Resume file")
    console.print(resume_to_text(load_resume(resume)), markup=False, highlight=False)


@app.command()
def prompts() -> None:
    """List prompt templates and whether they are overridden."""
    config = load_config()
    library = PromptLibrary.from_file(config.prompts.resolved_overrides_path)
    for prompt in library.list_prompts():
        flag = " [yellow](overridden)[/yellow]" if prompt.is_overridden else ""
        console.print(f"  [bold]{prompt.id}[/bold]: {prompt.description}{flag}")


@app.command()
def usage(
    recent: int = typer.Option(0, "--recent", "-n", help="Also list the N most recent runs"),
) -> None:
    """Show this month's usage and estimated cost."""
    config = load_config()
    store = UsageStore(config.usage.resolved_db_path)
    stats = store.get_monthly_stats()
    avg = stats["avg_match_score"]
    console.print(
        Panel(
            f"Runs: {stats['total_runs']} | success {stats['success_rate']:.0f}%\n"
            f"Tokens: {stats['total_input_tokens']} in / {stats['total_output_tokens']} out\n"
            f"Estimated cost: ${stats['total_cost_usd']:.4f}\n"
            f"Average match: {avg if avg is not None else '-'} | skills added: {stats['total_skills_added']}",
            title=f"Usage {stats['month']}",
        )
    )
    if recent:
        table = Table()
        for col in ("When", "Mode", "Resume", "Score", "Sections", "Cost"):
            table.add_column(col)
        for log in store.get_logs(limit=recent):
            table.add_row(
                log.timestamp.strftime("%Y-%m-%d %H:%M"),
                log.mode,
                log.resume_name or "-",
                str(log.match_score) if log.match_score is not None else "-",
                json.dumps(log.sections_improved) if log.mode == "improve" else "-",
                f"${log.estimated_cost_usd:.4f}",
            )
        console.print(table)


if __name__ == "__main__":
    app()
