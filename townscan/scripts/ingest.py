"""Ingestion CLI script."""

import logging
from pathlib import Path
from typing import Optional

import typer
from tqdm import tqdm

from townscan.chunking.chunker import emit_fragments
from townscan.core.config import settings
from townscan.core.logging import setup_logging
from townscan.ingestion.crawler import create_crawler
from townscan.ingestion.frontier import FrontierError
from townscan.ingestion.models import CrawlSummary, ScrapedDocument
from townscan.ingestion.parse_pdf import PdfExtractor
from townscan.ingestion.storage import CheckpointError, HashManifest, JsonlFragmentSink, load_results

setup_logging()
logger = logging.getLogger(__name__)

app = typer.Typer(help="Crawl a municipal website and turn it into retrieval-ready fragments.")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    if verbose:
        setup_logging("DEBUG")


def _print_summary(
    summary: Optional[CrawlSummary],
    fragments: Optional[int] = None,
    unchanged: Optional[int] = None,
    pdf_failures: Optional[int] = None,
) -> None:
    typer.echo("=" * 60)
    if summary is not None:
        stats = summary.stats
        typer.echo(f"Pages fetched:        {stats.pages_fetched}")
        typer.echo(f"Pages stored:         {summary.total_pages}")
        typer.echo(f"Pages skipped:        {stats.pages_skipped}")
        typer.echo(f"PDFs discovered:      {summary.total_pdfs}")
        typer.echo(f"Failed extraction:    {stats.extraction_failures}")
        typer.echo(f"Fetch failures:       {stats.fetch_failures}")
        typer.echo(f"Duration:             {summary.duration_seconds:.1f}s")
    if pdf_failures is not None:
        typer.echo(f"PDF failures:         {pdf_failures}")
    if fragments is not None:
        typer.echo(f"Fragments emitted:    {fragments}")
    if unchanged is not None:
        typer.echo(f"Unchanged documents:  {unchanged}")
    typer.echo("=" * 60)


def _run_crawl(resume: bool, max_pages: Optional[int], max_depth: Optional[int]) -> CrawlSummary:
    crawler = create_crawler(max_pages=max_pages, max_depth=max_depth)
    try:
        return crawler.crawl(resume=resume)
    except (FrontierError, CheckpointError) as e:
        logger.error(f"Crawl aborted: {e}")
        raise typer.Exit(code=1)
    finally:
        crawler.close()


def _emit(documents: list[ScrapedDocument], force: bool) -> tuple[int, int]:
    sink = JsonlFragmentSink(Path(settings.fragments_file))
    manifest = HashManifest(Path(settings.manifest_file))
    return emit_fragments(tqdm(documents, desc="Chunking documents"), sink, manifest, force=force)


@app.command()
def crawl(
    resume: bool = typer.Option(False, help="Resume an interrupted crawl from its checkpoint"),
    max_pages: Optional[int] = typer.Option(None, help="Override the page budget"),
    max_depth: Optional[int] = typer.Option(None, help="Override the link depth limit"),
):
    """Crawl the site and write the result file."""
    summary = _run_crawl(resume, max_pages, max_depth)
    _print_summary(summary)


@app.command()
def chunk(
    input_file: Path = typer.Option(Path(settings.output_file), "--input", help="Crawl result file"),
    force: bool = typer.Option(False, help="Re-chunk documents whose content hash is unchanged"),
):
    """Chunk the documents of a previous crawl into the fragment file."""
    if not input_file.exists():
        logger.error(f"Result file not found: {input_file}")
        raise typer.Exit(code=1)

    documents, _pdf_urls = load_results(input_file)
    fragments, unchanged = _emit(documents, force)
    _print_summary(None, fragments=fragments, unchanged=unchanged)


@app.command()
def run(
    resume: bool = typer.Option(False, help="Resume an interrupted crawl from its checkpoint"),
    with_pdfs: bool = typer.Option(True, "--with-pdfs/--no-pdfs", help="Download and extract discovered PDFs"),
    max_pages: Optional[int] = typer.Option(None, help="Override the page budget"),
    max_depth: Optional[int] = typer.Option(None, help="Override the link depth limit"),
    force: bool = typer.Option(False, help="Re-chunk documents whose content hash is unchanged"),
):
    """Crawl, extract PDFs, chunk, and emit fragments."""
    summary = _run_crawl(resume, max_pages, max_depth)
    documents = list(summary.documents)

    pdf_failures = None
    if with_pdfs and summary.pdf_urls:
        crawler = create_crawler(max_pages=max_pages, max_depth=max_depth)
        try:
            extractor = PdfExtractor(crawler.config, crawler.fetcher)
            documents.extend(extractor.extract_all(tqdm(summary.pdf_urls, desc="Extracting PDFs")))
            pdf_failures = extractor.failures
        finally:
            crawler.close()

    fragments, unchanged = _emit(documents, force)
    _print_summary(summary, fragments=fragments, unchanged=unchanged, pdf_failures=pdf_failures)


if __name__ == "__main__":
    app()
