"""Order-independent fingerprints of flattened schemas.

Two content types whose fingerprints are equal are shown as one row. The
fingerprint is an in-process grouping key only; field values containing the
separators can make different shapes collide.
"""

from openapi_to_doc.parser.base import PropertyRecord


def _sort_key(prop: PropertyRecord) -> tuple[str, str, str]:
    return (prop.name, prop.type, prop.format or "")


def build_signature(schema_text: str, properties: list[PropertyRecord]) -> str:
    """Canonical text for a (schema summary, property list) pair."""
    tokens = []
    for prop in sorted(properties, key=_sort_key):
        token = "|".join(
            [
                prop.name,
                prop.type,
                prop.format or "",
                "1" if prop.required else "0",
                prop.description or "",
            ]
        )
        if prop.children is not None:
            token += f"[{build_signature('', prop.children)}]"
        tokens.append(token)
    return f"{schema_text}::{'||'.join(tokens)}"
