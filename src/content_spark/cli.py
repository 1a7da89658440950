"""
Command-line interface for Content Spark.

Provides a CLI for generating website SEO copy or social media posts
and writing the text export.
"""

import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .app_state import CredentialStore, CredentialStoreError, validate_inputs
from .block_renderer import HeadingFragment, ListFragment, render_blocks
from .config import AppConfig
from .decoder import decode_generated_content, decode_saved_content
from .errors import GenerationError
from .filename_generator import write_export
from .llm_client import ContentGenerator
from .models import ContentType, GeneratedContent, GenerationRequest, ImageData, LanguageStyle
from .seo_scorer import score_seo_document
from .serializer import to_plain_dump

console = Console()


def _load_image(path: Path) -> ImageData:
    mime_type, _ = mimetypes.guess_type(path.name)
    try:
        return ImageData.from_bytes(path.read_bytes(), mime_type or "")
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--image") from e


def _resolve_api_key(api_key: Optional[str], store: CredentialStore) -> str:
    """Use the given key, else the stored one, else ask for one and store it."""
    if api_key:
        return api_key
    stored = store.load()
    if stored:
        return stored
    console.print("[yellow]No API key configured.[/yellow]")
    entered = click.prompt("Anthropic API key", hide_input=True).strip()
    store.save(entered)
    console.print(f"  API key saved to: {escape(str(store.path))}")
    return entered


def _load_saved_response(path: Path, content_type: str, source_url: Optional[str]) -> GeneratedContent:
    """Decode a saved result: either a to_dict() envelope or a raw API response."""
    raw = path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and "data" in data and "type" in data:
        return decode_saved_content(data)
    return decode_generated_content(raw, content_type, source_url)


@click.command()
@click.option(
    "--type",
    "content_type",
    type=click.Choice([t.value for t in ContentType]),
    default=ContentType.WEBSITE.value,
    show_default=True,
    help="Website SEO copy or a social media post.",
)
@click.option("--name", "product_name", default="", help="Product name.")
@click.option("--details", "product_details", default="", help="Free-text product details.")
@click.option(
    "--image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Product image (JPEG, PNG, GIF or WebP).",
)
@click.option("--url", "source_url", type=str, help="Product source URL.")
@click.option(
    "--style",
    "language_style",
    type=click.Choice([s.value for s in LanguageStyle]),
    default=LanguageStyle.BANGLISH.value,
    show_default=True,
    help="Language style for social posts.",
)
@click.option(
    "--api-key",
    type=str,
    envvar="ANTHROPIC_API_KEY",
    help="Anthropic API key. Can also be set via ANTHROPIC_API_KEY env var.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output path for the text export. Derived from the title if omitted.",
)
@click.option(
    "--from-json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Render a saved response instead of calling the API.",
)
@click.option(
    "--save-json",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also save the decoded result as JSON.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
def main(
    content_type: str,
    product_name: str,
    product_details: str,
    image: Optional[Path],
    source_url: Optional[str],
    language_style: str,
    api_key: Optional[str],
    output: Optional[Path],
    from_json: Optional[Path],
    save_json: Optional[Path],
    verbose: bool,
) -> None:
    """
    Content Spark - Generate product copy for the web and social media.

    Sends product information to the generative API, shows the result with
    its SEO score, and writes a .txt export.

    Examples:

        content-spark --name "Snail Foam Cleanser" --details "gentle, pH 5.5"

        content-spark --type social --style english --url https://example.com/p/123
    """
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    config = AppConfig.from_env()

    try:
        if from_json:
            content = _load_saved_response(from_json, content_type, source_url)
        else:
            request = GenerationRequest(
                content_type=ContentType(content_type),
                product_name=product_name,
                product_details=product_details,
                image=_load_image(image) if image else None,
                language_style=LanguageStyle(language_style),
                source_url=source_url,
            )
            problem = validate_inputs(request)
            if problem:
                console.print(f"[red]Error:[/red] {escape(problem)}")
                sys.exit(1)

            store = CredentialStore(config.credentials_path)
            key = _resolve_api_key(api_key, store)

            console.print(Panel.fit(
                "[bold magenta]Content Spark[/bold magenta]\n"
                f"Generating {content_type} content",
                border_style="magenta",
            ))
            with console.status("[bold green]Generating content..."):
                content = ContentGenerator(key, config=config.generator).generate(request)

        _display_content(content, config)

        export_text = to_plain_dump(content)
        output_path = write_export(content, export_text, output=output)
        if save_json:
            save_json.write_text(json.dumps(content.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
            if verbose:
                console.print(f"  Saved JSON to: {escape(str(save_json))}")

        console.print(f"\n[bold green]Success![/bold green] Output saved to: {escape(str(output_path))}")

    except GenerationError as e:
        console.print(f"[red]Generation error ({e.kind.value}):[/red] {escape(e.message)}")
        if e.is_auth_error and not api_key:
            CredentialStore(config.credentials_path).clear()
            console.print("[yellow]Stored API key cleared. Run again to enter a new one.[/yellow]")
        sys.exit(1)
    except CredentialStoreError as e:
        console.print(f"[red]Credential error:[/red] {escape(str(e))}")
        sys.exit(1)
    except click.ClickException:
        raise
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            import traceback
            console.print(escape(traceback.format_exc()))
        sys.exit(1)


def _render_description(content: GeneratedContent) -> Group:
    """Build rich renderables from the description fragments."""
    renderables = []
    for fragment in render_blocks(content.data.sections):
        if isinstance(fragment, HeadingFragment):
            renderables.append(Text(f"\n{fragment.text}", style="bold cyan"))
        elif isinstance(fragment, ListFragment):
            renderables.append(Text("\n".join(f"  • {item}" for item in fragment.items)))
        else:
            renderables.append(Text(fragment.text))
    return Group(*renderables)


def _display_content(content: GeneratedContent, config: AppConfig) -> None:
    """Display the generated content."""
    if content.is_social:
        post = content.data
        console.print(Panel(
            Text(to_plain_dump(content).rstrip()),
            title=Text(post.title or "Social Media Post"),
            border_style="magenta",
        ))
        return

    document = content.data
    console.print(Panel(_render_description(content), title=Text(document.product_title), border_style="magenta"))

    result = score_seo_document(document, config.scoring)
    score_table = Table(title="SEO Optimization Status", show_header=True)
    score_table.add_column("Score", style="cyan")
    score_table.add_column("Status", style="green")
    score_table.add_row(f"{result.score}/100", result.label)
    console.print(score_table)

    meta_table = Table(title="Meta Elements", show_header=True)
    meta_table.add_column("Element", style="cyan")
    meta_table.add_column("Value", style="yellow")
    meta_table.add_row("Meta Title", Text(document.meta_title))
    meta_table.add_row("Meta Description", Text(document.meta_description))
    for heading in document.h1_headings:
        meta_table.add_row("H1", Text(heading))
    if document.broad_match_keywords:
        meta_table.add_row("Keywords", Text(", ".join(document.broad_match_keywords)))
    console.print(meta_table)


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
