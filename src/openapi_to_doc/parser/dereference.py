"""Local ``$ref`` dereferencing for OpenAPI documents.

Every internal reference (``#/components/schemas/User``) is replaced by the
node it points to. Targets are resolved once and shared, so a schema that
refers to itself becomes a cyclic Python structure instead of an endless
expansion; consumers must bound their own recursion.
"""

import logging
from typing import Any
from urllib.parse import unquote

logger = logging.getLogger(__name__)


class RefResolutionError(KeyError):
    """Raised when a JSON pointer does not lead to a node."""


def _decode_pointer_token(token: str) -> str:
    # RFC 6901 escaping
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Resolve a JSON pointer (without the leading '#') against a document."""
    if pointer in ("", "/"):
        return document
    if not pointer.startswith("/"):
        raise RefResolutionError(f"Unsupported JSON pointer '{pointer}'")

    current = document
    for raw_token in pointer[1:].split("/"):
        token = _decode_pointer_token(raw_token)
        if isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError) as e:
                raise RefResolutionError(f"Invalid list index '{token}' in '{pointer}'") from e
        elif isinstance(current, dict):
            if token not in current:
                raise RefResolutionError(f"Key '{token}' not found while resolving '{pointer}'")
            current = current[token]
        else:
            raise RefResolutionError(f"Cannot descend into a scalar while resolving '{pointer}'")
    return current


class Dereferencer:
    """Builds a dereferenced copy of one document. Use once per document."""

    def __init__(self, document: dict):
        self._root = document
        self._resolved: dict[str, Any] = {}
        self._pending: set[str] = set()

    def dereference(self) -> dict:
        return self._walk(self._root)

    def _walk(self, node: Any) -> Any:
        if isinstance(node, list):
            return [self._walk(item) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            return self._replace_ref(ref, node)
        return {key: self._walk(value) for key, value in node.items()}

    def _replace_ref(self, ref: str, node: dict) -> Any:
        siblings = {key: value for key, value in node.items() if key != "$ref"}
        in_progress = ref in self._pending
        target = self._resolve_ref(ref)

        if target is None:
            # Unresolvable references stay in the tree as-is
            return {key: self._walk(value) for key, value in node.items()}
        if not siblings or not isinstance(target, dict) or in_progress:
            return target

        # OpenAPI 3.1 allows keys such as description next to a $ref
        merged = dict(target)
        merged.update(self._walk(siblings))
        return merged

    def _resolve_ref(self, ref: str) -> Any:
        if ref in self._resolved:
            return self._resolved[ref]

        if not ref.startswith("#"):
            logger.warning("Skipping non-local reference %s", ref)
            return None
        if ref in self._pending:
            logger.warning("Skipping reference cycle through %s", ref)
            return None

        try:
            # The fragment is a URI fragment, e.g. ~1users~1%7Bid%7D
            raw = resolve_pointer(self._root, unquote(ref[1:]))
        except RefResolutionError as e:
            logger.warning("Cannot resolve reference %s: %s", ref, e)
            return None

        self._pending.add(ref)
        try:
            if isinstance(raw, dict) and "$ref" not in raw:
                # Register before filling so self-references find it
                resolved: Any = {}
                self._resolved[ref] = resolved
                for key, value in raw.items():
                    resolved[key] = self._walk(value)
            elif isinstance(raw, list):
                resolved = []
                self._resolved[ref] = resolved
                resolved.extend(self._walk(item) for item in raw)
            else:
                resolved = self._walk(raw)
                if resolved is None or (isinstance(resolved, dict) and "$ref" in resolved):
                    return None
                self._resolved[ref] = resolved
        finally:
            self._pending.discard(ref)
        return resolved


def dereference(document: dict) -> dict:
    """Return a copy of ``document`` with all local references replaced."""
    return Dereferencer(document).dereference()
