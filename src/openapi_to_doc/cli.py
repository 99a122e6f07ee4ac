"""CLI entry point for openapi-to-doc."""

import logging
import sys
from pathlib import Path

import click

from openapi_to_doc.errors import AppError, file_exists, write_error
from openapi_to_doc.parser.base import ApiDocument
from openapi_to_doc.parser.loader import load_document
from openapi_to_doc.transformer.config import DEFAULT_MAX_DEPTH, NormalizerConfig
from openapi_to_doc.transformer.endpoints import EndpointNormalizer

VERSION = "1.0.0"


def resolve_output_path(input_path: Path, output: str | None) -> Path:
    """Decide where the JSON model is written.

    Defaults to the input's directory and name; a directory output gets the
    input name, and a missing ``.json`` suffix is appended.
    """
    default_name = f"{input_path.stem}.json"
    if not output:
        return input_path.parent / default_name

    output_path = Path(output)
    # Path() drops a trailing separator, so check the raw text
    if output.endswith(("/", "\\")) or output_path.is_dir():
        return output_path / default_name
    if output_path.suffix.lower() != ".json":
        return output_path.with_name(output_path.name + ".json")
    return output_path


def _load(doc_path: Path, max_depth: int) -> ApiDocument:
    click.echo(f"Reading OpenAPI document {doc_path}...", err=True)
    document = load_document(doc_path)

    click.echo("Extracting endpoints...", err=True)
    normalizer = EndpointNormalizer(NormalizerConfig(max_depth=max_depth))
    result = normalizer.normalize(document)
    click.echo(f"Found {len(result.endpoints)} endpoints.", err=True)
    return result


def _fail(error: AppError):
    click.echo(f"Error: {error.message}", err=True)
    if error.hint:
        click.echo(f"       {error.hint}", err=True)
    sys.exit(error.exit_code)


@click.group()
@click.version_option(version=VERSION, prog_name="otd")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """otd - turn OpenAPI 3 documents into flat, table-ready endpoint data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("-o", "--output", default=None, help="Output file or directory (default: next to the input).")
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing output file.")
@click.option(
    "--max-depth",
    default=DEFAULT_MAX_DEPTH,
    show_default=True,
    envvar="OTD_MAX_DEPTH",
    type=click.IntRange(min=0),
    help="Nesting depth for flattened schema properties.",
)
def convert(doc_path: Path, output: str | None, force: bool, max_depth: int):
    """Convert an OpenAPI document into the normalized JSON model."""
    try:
        output_path = resolve_output_path(doc_path, output)
        if output_path.exists() and not force:
            raise file_exists(output_path)

        result = _load(doc_path, max_depth)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.model_dump_json(indent=2, exclude_none=True), encoding="utf-8")
        except OSError as e:
            raise write_error(output_path, e) from e
    except AppError as e:
        _fail(e)

    click.echo(f"Saved {output_path}")


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option(
    "--max-depth",
    default=DEFAULT_MAX_DEPTH,
    envvar="OTD_MAX_DEPTH",
    type=click.IntRange(min=0),
    help="Nesting depth for flattened schema properties.",
)
def endpoints(doc_path: Path, max_depth: int):
    """List the operations of an OpenAPI document."""
    try:
        result = _load(doc_path, max_depth)
    except AppError as e:
        _fail(e)

    for endpoint in result.endpoints:
        line = f"{endpoint.method:<7} {endpoint.path}"
        if endpoint.summary:
            line = f"{line}  {endpoint.summary}"
        click.echo(line)
