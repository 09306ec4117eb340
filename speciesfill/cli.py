# speciesfill/cli.py
from __future__ import annotations
import json
import logging
from dataclasses import asdict
import typer
from rich import print
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from speciesfill import config
from speciesfill.errors import ParseFailure, SourceUnavailable
from speciesfill.resolver import resolve as resolve_query
from speciesfill.search import fetch_summary, search_pages
from speciesfill.wiki_client import WikiClient

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.command()
def search(
    query: str = typer.Argument(..., help="Free-form query to search Wikipedia"),
    lang: str = typer.Option(config.DEFAULT_LANG, help="Language code, e.g., en, es"),
    k: int = typer.Option(5, "--k", help="Number of results to return (max 50)"),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON instead of table"),
) -> None:
    """
    Search Wikipedia and show top-k candidate articles.
    """
    client = WikiClient(language=lang)  # type: ignore[arg-type]
    try:
        hits = search_pages(client, query, limit=k)
    except (SourceUnavailable, ParseFailure) as exc:
        print(Panel.fit(f"[bold red]Search failed:[/bold red] {exc}"))
        raise typer.Exit(code=1)

    if json_out:
        typer.echo(json.dumps([asdict(hit) for hit in hits], indent=2, ensure_ascii=False))
        return

    if not hits:
        print(Panel.fit(f"[bold red]No results for:[/bold red] {query!r}"))
        return

    table = Table(title=f"Search results for: {query!r} ({lang})")
    table.add_column("#", justify="right", style="bold")
    table.add_column("Title")
    table.add_column("Page id", justify="right")

    for i, h in enumerate(hits, start=1):
        table.add_row(str(i), h.title, str(h.page_id or ""))

    print(table)


@app.command()
def summary(
    title: str = typer.Argument(..., help="Exact Wikipedia page title"),
    lang: str = typer.Option(config.DEFAULT_LANG, help="Language code, e.g., en, es"),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """
    Show the REST summary of one article.
    """
    client = WikiClient(language=lang)  # type: ignore[arg-type]
    try:
        data = fetch_summary(client, title)
    except (SourceUnavailable, ParseFailure) as exc:
        print(Panel.fit(f"[bold red]Summary unavailable:[/bold red] {exc}"))
        raise typer.Exit(code=1)

    if json_out:
        typer.echo(json.dumps(asdict(data), indent=2, ensure_ascii=False))
        return

    kind = " [yellow](disambiguation)[/yellow]" if data.is_disambiguation else ""
    print(Panel.fit(f"[bold]{data.title}[/bold]{kind}\n\n{data.extract_text or ''}"))


@app.command()
def resolve(
    query: str = typer.Argument(..., help="Species name, common or scientific"),
    lang: str = typer.Option(config.DEFAULT_LANG, help="Language code, e.g., en, es"),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every lookup"),
) -> None:
    """
    End-to-end: search -> pick article -> Wikidata facts -> species record.
    """
    _setup_logging(verbose)
    client = WikiClient(language=lang)  # type: ignore[arg-type]
    result = resolve_query(query, client=client)

    if json_out:
        payload = {
            "query": result.query,
            "status": result.status.value,
            "message": result.message,
            "candidate": result.candidate.as_form_defaults(),
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    elif not result.ok:
        print(Panel.fit(f"[bold red]{result.message}[/bold red]"))
    else:
        table = Table(title=f"Species record for: {query!r}")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for field, value in result.candidate.as_form_defaults().items():
            table.add_row(field, "" if value is None else str(value))
        print(table)
        print(f"[dim]{result.message}[/dim]")

    if not result.ok:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
