"""Detect which API description format a loaded document uses."""


def detect_version(document) -> str:
    """Detect the version family of a loaded API document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    if not isinstance(document, dict):
        return "unknown"

    if "openapi" in document:
        if str(document["openapi"]).startswith("3."):
            return "openapi3"
        return "unknown"

    if "swagger" in document:
        if str(document["swagger"]).startswith("2."):
            return "swagger2"
        return "unknown"

    return "unknown"


def declared_version(document) -> str:
    """Return the raw version string the document declares, or an empty string."""
    if not isinstance(document, dict):
        return ""
    for key in ("openapi", "swagger"):
        if key in document:
            return f"{key} {document[key]}"
    return ""
