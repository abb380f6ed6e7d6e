"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from job_pal.clients.llm_client import LLMClient
from job_pal.config import load_config
from job_pal.exceptions import ExtractionFailed, JobPalError
from job_pal.models.artifact import Artifact, ResumeArtifact
from job_pal.models.generation import GenerationKind
from job_pal.models.interview import InterviewSession
from job_pal.pipeline.orchestrator import JobPalService

app = typer.Typer(
    name="job-pal",
    help="AI resume, cover letter and mock interview assistant",
    no_args_is_help=True,
)
interview_app = typer.Typer(help="Run a mock interview for a job", no_args_is_help=True)
template_app = typer.Typer(help="Manage .docx templates", no_args_is_help=True)
app.add_typer(interview_app, name="interview")
app.add_typer(template_app, name="template")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _service() -> JobPalService:
    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, model=config.llm.model)
    return JobPalService(llm, config)


def _run(coro):
    """Run a pipeline coroutine, turning pipeline errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except ExtractionFailed as e:
        console.print(f"[red]{e}[/red]")
        console.print(Panel(e.raw_text or "(empty)", title="Raw model output", border_style="red"))
        raise typer.Exit(1)
    except JobPalError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _print_artifact(artifact: Artifact) -> None:
    console.print(Panel(artifact.body or "(empty)", title=f"{artifact.job_title} @ {artifact.company}"))
    if isinstance(artifact, ResumeArtifact) and artifact.result.ats_keywords:
        console.print(f"[dim]ATS keywords: {', '.join(artifact.result.ats_keywords)}[/dim]")
    if artifact.document_path:
        console.print(f"[green]Document generated. Download with: job-pal download {artifact.id}[/green]")
    else:
        console.print("[dim]No document template active; text only.[/dim]")


def _print_turn(session: InterviewSession) -> None:
    current = session.current_question
    if current is None:
        return
    if current.feedback:
        console.print(Panel(current.feedback, title="Feedback", border_style="yellow"))
    console.print(
        Panel(
            current.content,
            title=f"Q{session.question_count} ({current.question_type or 'general'})",
            border_style="cyan",
        )
    )
    if current.tip:
        console.print(f"[dim]Tip: {current.tip}[/dim]")
    console.print(f"[dim]Session: {session.id}[/dim]")


@app.command()
def resume(job_id: str = typer.Argument(help="Job id")) -> None:
    """Generate (or regenerate) the tailored resume for a job."""
    service = _service()
    with console.status("Tailoring resume..."):
        artifact = _run(service.generate_resume(job_id))
    _print_artifact(artifact)


@app.command("cover-letter")
def cover_letter(job_id: str = typer.Argument(help="Job id")) -> None:
    """Generate (or regenerate) the cover letter for a job."""
    service = _service()
    with console.status("Writing cover letter..."):
        artifact = _run(service.generate_cover_letter(job_id))
    _print_artifact(artifact)


@app.command()
def match(job_id: str = typer.Argument(help="Job id")) -> None:
    """Score how well your profile matches a job."""
    service = _service()
    with console.status("Analyzing match..."):
        analysis = _run(service.analyze_match(job_id))
    score = analysis.match_score if analysis.match_score is not None else "-"
    console.print(
        Panel(
            f"[bold]Match score: {score}[/bold]\n{analysis.summary}\n\n"
            f"Matching: {', '.join(analysis.matching_skills)}\n"
            f"Missing: {', '.join(analysis.missing_skills)}",
            title="Match analysis",
        )
    )
    for rec in analysis.recommendations:
        console.print(f"  - {rec}")


@app.command()
def download(
    artifact_id: str = typer.Argument(help="Resume or cover letter id"),
    output: Path = typer.Option(None, "--output", "-o", help="Destination file or directory"),
) -> None:
    """Copy a generated .docx out of the data directory."""
    service = _service()
    try:
        path, name = service.download(artifact_id)
    except JobPalError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = Path.cwd() / name
    elif output.is_dir():
        output = output / name
    output.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(path, output)
    console.print(f"[green]Saved: {output}[/green]")


@template_app.command("upload")
def template_upload(
    kind: GenerationKind = typer.Argument(help="resume or cover-letter"),
    file: Path = typer.Argument(help=".docx template with {{placeholders}}"),
) -> None:
    """Make FILE the active template for KIND, replacing any previous one."""
    service = _service()
    try:
        entry = service.upload_template(kind, file)
    except JobPalError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Active {kind.value} template: {entry.original_name}[/green]")
    if entry.placeholders:
        console.print(f"[dim]Placeholders: {', '.join(entry.placeholders)}[/dim]")
    else:
        console.print("[yellow]No {{placeholders}} found in this template.[/yellow]")


@template_app.command("list")
def template_list() -> None:
    """List the active templates."""
    entries = _service().list_templates()
    if not entries:
        console.print("[yellow]No templates uploaded.[/yellow]")
        return
    table = Table("Kind", "File", "Placeholders", "Uploaded")
    for e in entries:
        table.add_row(e.kind.value, e.original_name, str(len(e.placeholders)), f"{e.uploaded_at:%Y-%m-%d}")
    console.print(table)


@interview_app.command("start")
def interview_start(job_id: str = typer.Argument(help="Job id")) -> None:
    """Start a new mock interview."""
    service = _service()
    with console.status("Preparing the first question..."):
        session = _run(service.start_interview(job_id))
    _print_turn(session)


@interview_app.command("respond")
def interview_respond(
    job_id: str = typer.Argument(help="Job id"),
    session_id: str = typer.Argument(help="Interview session id"),
    answer: str = typer.Argument(help="Your answer to the current question"),
) -> None:
    """Answer the current question and get the next one."""
    service = _service()
    with console.status("Interviewer is thinking..."):
        session = _run(service.respond(job_id, session_id, answer))
    _print_turn(session)


@interview_app.command("end")
def interview_end(
    job_id: str = typer.Argument(help="Job id"),
    session_id: str = typer.Argument(help="Interview session id"),
) -> None:
    """End the interview and show the final assessment."""
    service = _service()
    with console.status("Scoring the interview..."):
        session = _run(service.end_interview(job_id, session_id))
    fb = session.feedback
    lines = [f"[bold]Score: {fb.overall_score}/10[/bold]", fb.summary, ""]
    lines += ["[green]Strengths[/green]"] + [f"  - {s}" for s in fb.strengths]
    lines += ["[yellow]Improvements[/yellow]"] + [f"  - {s}" for s in fb.improvements]
    lines += ["[cyan]Tips[/cyan]"] + [f"  - {s}" for s in fb.tips]
    console.print(Panel("\n".join(lines), title="Interview assessment"))


@interview_app.command("list")
def interview_list(job_id: str = typer.Argument(help="Job id")) -> None:
    """List interview sessions for a job."""
    sessions = _service().list_interviews(job_id)
    if not sessions:
        console.print("[yellow]No interviews for this job yet.[/yellow]")
        return
    table = Table("Session", "Questions", "Started", "Score")
    for s in sessions:
        score = str(s.feedback.overall_score) if s.feedback else "in progress"
        table.add_row(s.id, str(s.question_count), f"{s.created_at:%Y-%m-%d %H:%M}", score)
    console.print(table)


if __name__ == "__main__":
    app()
