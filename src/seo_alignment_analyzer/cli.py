"""
Command-line interface for SEO Alignment Analyzer.

Provides a CLI for scoring copy against a competitor and for rewriting it
with the recommended keywords.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analyzer import analyze_alignment
from .config import AnalysisConfig
from .content_sources import ContentExtractionError, load_text
from .diff import compute_contextual_diff, get_changes_summary
from .embeddings import create_embedding_provider
from .errors import AnalysisError, InvalidInputError, ProviderError
from .keyword_loader import KeywordLoadError, load_keywords, parse_keywords
from .llm_client import LLMClient
from .models import AnalysisResult, Keyword
from .prompt_builder import enhance_text

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_keywords(
    keywords: Optional[str],
    keywords_file: Optional[Path],
    config: AnalysisConfig,
) -> list[Keyword]:
    if not keywords and not keywords_file:
        raise InvalidInputError("Must provide either --keywords or --keywords-file")
    if keywords and keywords_file:
        raise InvalidInputError("Provide only one of --keywords or --keywords-file")

    if keywords_file:
        return load_keywords(keywords_file)
    return parse_keywords(keywords, config)


def _run_analysis(
    keywords: Optional[str],
    keywords_file: Optional[Path],
    main_source: str,
    competitor_source: str,
    mode: str,
    provider_name: str,
    embedding_model: Optional[str],
    api_key: Optional[str],
    verbose: bool,
) -> tuple[AnalysisResult, str]:
    config = AnalysisConfig(analysis_mode=mode, embedding_model=embedding_model)

    with console.status("[bold green]Loading content..."):
        keyword_list = _resolve_keywords(keywords, keywords_file, config)
        main_text = load_text(main_source)
        competitor_text = load_text(competitor_source)
    if verbose:
        console.print(f"  Loaded {len(keyword_list)} keywords")
        console.print(f"  Main copy: ~{len(main_text.split())} words from {main_source}")
        console.print(f"  Competitor copy: ~{len(competitor_text.split())} words from {competitor_source}")

    provider = create_embedding_provider(
        provider_name, api_key=api_key, model=config.embedding_model
    )
    try:
        with console.status(f"[bold green]Running {mode} analysis..."):
            result = analyze_alignment(
                keyword_list, main_text, competitor_text, provider, config=config
            )
    finally:
        provider.close()
    return result, main_text


def _display_result(result: AnalysisResult, verbose: bool) -> None:
    """Display analysis summary."""
    gap_style = "green" if result.gap_percent > 0 else "red"
    console.print(Panel.fit(
        f"[bold]Your copy:[/bold] {result.main_score_percent}%   "
        f"[bold]Competitor:[/bold] {result.competitor_score_percent}%   "
        f"[bold]Gap:[/bold] [{gap_style}]{result.gap_percent:+}%[/{gap_style}]\n"
        f"{result.gap_analysis_text}",
        title="Alignment Score",
        border_style="blue",
    ))

    kw_table = Table(title="Keyword Coverage", show_header=True)
    kw_table.add_column("Keyword", style="green")
    kw_table.add_column("Weight", justify="right")
    kw_table.add_column("Mentions", justify="right")
    kw_table.add_column("Competitor", justify="right")
    kw_table.add_column("Coverage", justify="right")
    kw_table.add_column("Related Terms", style="dim")
    for c in result.keyword_coverage:
        competitor = str(c.competitor_mention_count)
        if c.competitor_has_advantage:
            competitor = f"[red]{competitor}[/red]"
        kw_table.add_row(
            c.keyword,
            f"{c.weight:g}",
            str(c.direct_mention_count),
            competitor,
            f"{c.semantic_coverage_percent}%",
            ", ".join(c.related_terms_found),
        )
    console.print(kw_table)

    if result.main_sections and verbose:
        section_table = Table(title="Section Scores", show_header=True)
        section_table.add_column("Section", style="cyan")
        section_table.add_column("Score", justify="right")
        for s in result.main_sections:
            section_table.add_row(s.title, f"{s.score}%")
        console.print(section_table)

    imp_table = Table(title="Section Improvements", show_header=True)
    imp_table.add_column("Section", style="cyan")
    imp_table.add_column("Score", justify="right")
    imp_table.add_column("Missing Keywords", style="yellow")
    imp_table.add_column("Suggested Phrases")
    for imp in result.section_improvements:
        imp_table.add_row(
            imp.section_title,
            f"{imp.current_score_percent}%",
            ", ".join(imp.missing_keywords),
            "\n".join(imp.suggested_phrases),
        )
    console.print(imp_table)

    if result.score_predictions:
        pred_table = Table(title="Score Predictions", show_header=True)
        pred_table.add_column("Keyword", style="green")
        pred_table.add_column("Mentions", justify="right")
        pred_table.add_column("Impact", justify="right")
        pred_table.add_column("Predicted", justify="right")
        for p in result.score_predictions:
            pred_table.add_row(
                p.keyword,
                f"{p.current_mention_count} -> {p.suggested_mention_count}",
                f"+{p.impact_percent}%",
                f"{p.predicted_score_percent}%",
            )
        console.print(pred_table)
        console.print(
            f"[cyan]Predicted score with all improvements:[/cyan] {result.predicted_score_percent}%"
        )

    if verbose:
        console.print(f"\n[dim]Processing time: {result.processing_time_ms} ms[/dim]")


def _handle_error(e: Exception, verbose: bool) -> None:
    if isinstance(e, ContentExtractionError):
        console.print(f"[red]Content extraction error:[/red] {e}")
    elif isinstance(e, KeywordLoadError):
        console.print(f"[red]Keyword loading error:[/red] {e}")
    elif isinstance(e, InvalidInputError):
        console.print(f"[red]Invalid input:[/red] {e}")
    elif isinstance(e, ProviderError):
        console.print(f"[red]Provider error:[/red] {e.user_message}")
        if verbose:
            console.print(f"[dim]{e}[/dim]")
    elif isinstance(e, AnalysisError):
        console.print(f"[red]Analysis error:[/red] {e.user_message}")
    else:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
    sys.exit(1)


def _common_options(func):
    options = [
        click.option("--keywords", "-k", type=str,
                     help='Keywords, comma or newline separated ("seo:3, content marketing").'),
        click.option("--keywords-file", type=click.Path(exists=True, path_type=Path),
                     help="Path to keyword file (CSV or Excel)."),
        click.option("--main", "main_source", required=True,
                     help="Your copy: URL, .docx, or text file."),
        click.option("--competitor", "competitor_source", required=True,
                     help="Competitor copy: URL, .docx, or text file."),
        click.option("--mode", type=click.Choice(["full", "chunked"]), default="full",
                     show_default=True, help="Embed whole documents or individual sections."),
        click.option("--provider", "provider_name", type=click.Choice(["openai", "local"]),
                     default="openai", show_default=True, help="Embedding provider."),
        click.option("--embedding-model", type=str, default=None,
                     help="Embedding model name. Defaults to the provider's own default."),
        click.option("--api-key", type=str, envvar="OPENAI_API_KEY",
                     help="OpenAI API key. Can also be set via OPENAI_API_KEY env var."),
        click.option("--verbose", "-v", is_flag=True, default=False,
                     help="Enable verbose output."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="seo-alignment-analyzer")
def main() -> None:
    """
    SEO Alignment Analyzer - Score copy against target keywords.

    Examples:

        seo-align analyze -k "seo:3, content marketing" --main ours.md --competitor https://example.com

        seo-align enhance --keywords-file kw.csv --main ours.docx --competitor theirs.txt -o better.md
    """


@main.command()
@_common_options
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Print the result as JSON instead of tables.")
def analyze(
    keywords: Optional[str],
    keywords_file: Optional[Path],
    main_source: str,
    competitor_source: str,
    mode: str,
    provider_name: str,
    embedding_model: Optional[str],
    api_key: Optional[str],
    verbose: bool,
    as_json: bool,
) -> None:
    """Score your copy and a competitor's copy against the keywords."""
    _configure_logging(verbose)
    try:
        result, _ = _run_analysis(
            keywords, keywords_file, main_source, competitor_source,
            mode, provider_name, embedding_model, api_key, verbose and not as_json,
        )
    except Exception as e:
        _handle_error(e, verbose)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_result(result, verbose)


@main.command()
@_common_options
@click.option("--anthropic-api-key", type=str, envvar="ANTHROPIC_API_KEY",
              help="Anthropic API key. Can also be set via ANTHROPIC_API_KEY env var.")
@click.option("--output", "-o", type=click.Path(path_type=Path),
              help="Write the enhanced text here instead of printing it.")
def enhance(
    keywords: Optional[str],
    keywords_file: Optional[Path],
    main_source: str,
    competitor_source: str,
    mode: str,
    provider_name: str,
    embedding_model: Optional[str],
    api_key: Optional[str],
    verbose: bool,
    anthropic_api_key: Optional[str],
    output: Optional[Path],
) -> None:
    """Analyze, then rewrite your copy with the recommended keywords."""
    _configure_logging(verbose)
    try:
        result, original_text = _run_analysis(
            keywords, keywords_file, main_source, competitor_source,
            mode, provider_name, embedding_model, api_key, verbose,
        )
        config = AnalysisConfig(analysis_mode=mode)
        with LLMClient(
            api_key=anthropic_api_key,
            model=config.completion_model,
            max_tokens=config.completion_max_tokens,
            temperature=config.completion_temperature,
        ) as client:
            with console.status("[bold green]Enhancing content..."):
                enhanced = enhance_text(client, original_text, result.section_improvements)
    except Exception as e:
        _handle_error(e, verbose)
        return

    summary = get_changes_summary(
        compute_contextual_diff(original_text, enhanced, result.section_improvements)
    )
    console.print(
        f"[bold]Changes:[/bold] {summary['insertions']} insertions "
        f"(+{summary['words_added']} words), {summary['removals']} removals"
    )
    if summary["keywords_added"]:
        console.print(f"[cyan]Keywords added:[/cyan] {', '.join(summary['keywords_added'])}")

    if output:
        output.write_text(enhanced, encoding="utf-8")
        console.print(f"\n[bold green]Success![/bold green] Enhanced text saved to: {output}")
    else:
        click.echo(enhanced)


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
