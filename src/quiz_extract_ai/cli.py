"""
CLI for quiz-extract-ai.

Provides commands for extracting questions and text from documents, checking
readiness and generating a configuration file.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from quiz_extract_ai.config import Settings, create_default_config, load_config
from quiz_extract_ai.errors import QuizExtractError
from quiz_extract_ai.extraction import TextExtractor
from quiz_extract_ai.health import check_readiness
from quiz_extract_ai.logging_config import configure_logging
from quiz_extract_ai.models import Question
from quiz_extract_ai.pipeline import QuestionPipeline

app = typer.Typer(
    name="quiz-extract",
    help="Extract multiple-choice questions from exam documents with AI.",
    add_completion=False,
)

# Results go to stdout; status and errors go to stderr so output can be piped
console = Console(stderr=True)

EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings from config file or defaults."""
    if config_path is not None and not config_path.exists():
        console.print(f"[red]Config file not found: {config_path}[/red]")
        raise typer.Exit(EXIT_BAD_INPUT)
    settings = load_config(config_path)
    configure_logging(settings.logging, console)
    return settings


def read_input(path: Path) -> bytes:
    """Read the document to process."""
    if not path.is_file():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(EXIT_BAD_INPUT)
    return path.read_bytes()


def _fail(error: QuizExtractError) -> typer.Exit:
    code = EXIT_BAD_INPUT if error.is_client_error else EXIT_FAILURE
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    return typer.Exit(code)


def _questions_table(questions: list[Question]) -> Table:
    table = Table(title="Extracted Questions")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Answer", style="green")

    for index, question in enumerate(questions[:20], start=1):
        table.add_row(str(index), question.text, question.correct_answer)

    if len(questions) > 20:
        table.add_row("...", "...", "...")

    return table


@app.command()
def questions(
    file: Path = typer.Argument(..., help="Document to extract questions from"),
    topic: str | None = typer.Option(None, "--topic", "-t", help="Topic ID for every question"),
    subtopic: str | None = typer.Option(
        None, "--subtopic", "-s", help="Subtopic ID for every question"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON to this file"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Extract multiple-choice questions from a PDF, DOCX, TXT or image file."""
    settings = get_settings(config)
    data = read_input(file)

    try:
        pipeline = QuestionPipeline.from_settings(settings)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        console.print("Set the API key in the config file or environment, or run: quiz-extract health")
        raise typer.Exit(EXIT_FAILURE) from None

    async def run_pipeline() -> list[Question]:
        try:
            return await pipeline.run(data, file.name, topic_id=topic, subtopic_id=subtopic)
        finally:
            await pipeline.aclose()

    try:
        with console.status(f"[cyan]Processing {file.name}...[/cyan]"):
            result = asyncio.run(run_pipeline())
    except QuizExtractError as e:
        raise _fail(e) from None

    payload = json.dumps([q.to_dict() for q in result], indent=2, ensure_ascii=False)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload + "\n", encoding="utf-8")
        if result:
            console.print(_questions_table(result))
        console.print(f"[green]Saved {len(result)} questions to {output}[/green]")
    else:
        typer.echo(payload)
        console.print(f"[green]Extracted {len(result)} questions[/green]")


@app.command()
def text(
    file: Path = typer.Argument(..., help="Document to extract text from"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Print the text extracted from a document, without calling the model."""
    settings = get_settings(config)
    data = read_input(file)
    extractor = TextExtractor.from_settings(settings)

    try:
        content = asyncio.run(extractor.extract(data, file.name))
    except QuizExtractError as e:
        raise _fail(e) from None

    if not content.strip():
        console.print("[yellow]No text extracted[/yellow]")
        return
    typer.echo(content)


@app.command()
def health(
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Check configuration and OCR availability."""
    settings = get_settings(config)
    report = check_readiness(settings)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Detail", style="dim")

    for check in report.checks:
        status = "[green]ok[/green]" if check.ok else "[red]missing[/red]"
        table.add_row(check.name, status, check.detail)

    verdict = "[bold green]ready[/bold green]" if report.ready else "[bold red]not ready[/bold red]"
    console.print(
        Panel(table, title=f"[bold blue]quiz-extract[/bold blue] {verdict}", border_style="blue")
    )

    if not report.ready:
        raise typer.Exit(EXIT_FAILURE)


@app.command()
def init(
    output_path: Path = typer.Option(
        Path("config.yaml"),
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """Generate a default configuration file."""
    if output_path.exists():
        overwrite = typer.confirm(f"{output_path} already exists. Overwrite?")
        if not overwrite:
            raise typer.Abort()

    create_default_config(output_path)
    console.print(f"[green]Created config file: {output_path}[/green]")
    console.print("\nEdit the file and set your API key, then run:")
    console.print("  quiz-extract questions exam.pdf --config config.yaml")


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
