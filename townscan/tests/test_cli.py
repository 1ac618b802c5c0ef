"""Tests for the ingestion CLI."""

import orjson
from typer.testing import CliRunner

from townscan.core.config import settings
from townscan.scripts.ingest import app

runner = CliRunner()


def test_chunk_command(tmp_path, monkeypatch):
    """Test chunking a result file into the fragment file."""
    results = tmp_path / "scraped.json"
    results.write_bytes(
        orjson.dumps(
            {
                "documents": [
                    {
                        "content": "# Dog Licenses\n\nAll dogs must be licensed by March 31.",
                        "source_url": "https://town.example.gov/clerk/dogs",
                        "title": "Dog Licenses",
                        "document_type": "html",
                        "department": "Town Clerk",
                        "last_updated": "2024-01-01T00:00:00+00:00",
                        "content_hash": "abc",
                        "size_bytes": 52,
                    }
                ],
                "pdf_urls": [],
            }
        )
    )
    monkeypatch.setattr(settings, "fragments_file", str(tmp_path / "fragments.jsonl"))
    monkeypatch.setattr(settings, "manifest_file", str(tmp_path / "manifest.json"))

    result = runner.invoke(app, ["chunk", "--input", str(results)])

    assert result.exit_code == 0
    assert "Fragments emitted:    1" in result.output
    lines = (tmp_path / "fragments.jsonl").read_bytes().splitlines()
    record = orjson.loads(lines[0])
    assert record["source_url"] == "https://town.example.gov/clerk/dogs"
    assert record["fragment_metadata"]["department"] == "Town Clerk"

    rerun = runner.invoke(app, ["chunk", "--input", str(results)])
    assert "Unchanged documents:  1" in rerun.output


def test_chunk_command_missing_input(tmp_path):
    """Test a missing result file exits non-zero."""
    result = runner.invoke(app, ["chunk", "--input", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
