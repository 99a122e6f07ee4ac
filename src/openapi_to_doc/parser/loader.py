"""OpenAPI document loader.

Reads a YAML or JSON file, checks that it is an OpenAPI 3.x document and
returns it with all local references dereferenced.
"""

import logging
from pathlib import Path

import yaml

from openapi_to_doc import errors
from openapi_to_doc.parser.dereference import dereference
from openapi_to_doc.parser.detect import declared_version, detect_version

logger = logging.getLogger(__name__)


def load_document(file_path: Path) -> dict:
    """Load, validate the version of, and dereference an OpenAPI 3 file."""
    file_path = Path(file_path)
    if not file_path.is_file():
        raise errors.file_not_found(file_path)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise errors.AppError(
            errors.ErrorCode.FILE_READ_ERROR,
            f"Cannot read file: {file_path}",
            f"Cause: {e}",
        ) from e

    return parse_document(text)


def parse_document(text: str) -> dict:
    """Parse document text (YAML or JSON) into a dereferenced tree."""
    # JSON is a subset of YAML, one parser covers both
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        first_line = (str(e).splitlines() or ["YAML error"])[0]
        raise errors.invalid_openapi(first_line) from e

    if not isinstance(document, dict):
        raise errors.invalid_openapi("top level is not a mapping")

    version = detect_version(document)
    if version == "swagger2":
        raise errors.unsupported_version(declared_version(document))
    if version != "openapi3":
        if declared_version(document):
            raise errors.unsupported_version(declared_version(document))
        raise errors.invalid_openapi("missing 'openapi' version field")

    logger.debug("Dereferencing %s document", document["openapi"])
    return dereference(document)
