"""Authoring tool: turns form-style input into catalog JSON documents."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

VERTEX_TEMPLATE: Dict[str, Any] = {
    "id": "",
    "name": "",
    "abbreviation": "",
    "type": "",
    "tags": [],
    "description": "",
    "definition": "",
    "references": [],
    "related_vertices": [],
    "notes": "",
}

EDGE_TEMPLATE: Dict[str, Any] = {
    "id": "",
    "type": "",
    "name": "",
    "description": "",
    "overview": "",
    "theorem": "",
    "construction": "",
    "proof": "",
    "source_vertices": [],
    "target_vertices": [],
    "tags": [],
    "model": "",
    "references": [],
    "notes": "",
}

LIST_FIELDS = ("tags", "related_vertices", "source_vertices", "target_vertices")


def split_list(value: Any) -> List[str]:
    """Split a comma-separated string (or clean a list), dropping empties."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [str(item).strip() for item in items if str(item).strip()]


def parse_references(raw: Any, previous: List[Dict[str, Any]] | None = None) -> List[Dict[str, Any]]:
    """
    Parse pasted references, keeping the previous value when they are malformed.
    
    Args:
        raw: A list of reference objects or a JSON string holding one
        previous: Last valid references
        
    Returns:
        The parsed references, or previous when raw is not a valid list
    """
    previous = list(previous or [])
    if raw is None or raw == "":
        return previous
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed references JSON")
            return previous
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        return previous
    return [
        {
            "title": str(item.get("title", "")),
            "author": str(item.get("author", "")),
            "year": item.get("year"),
            "url": str(item.get("url", "")),
        }
        for item in raw
    ]


def _build(template: Dict[str, Any], form: Dict[str, Any],
           previous_references: List[Dict[str, Any]] | None) -> Tuple[Dict[str, Any], str]:
    document = {key: (list(value) if isinstance(value, list) else value) for key, value in template.items()}
    for key in template:
        if key not in form or form[key] is None:
            continue
        if key in LIST_FIELDS:
            document[key] = split_list(form[key])
        elif key == "references":
            continue
        else:
            document[key] = str(form[key]).strip()
    document["references"] = parse_references(form.get("references"), previous_references)
    return document, json.dumps(document, indent=2)


def build_vertex_document(form: Dict[str, Any],
                          previous_references: List[Dict[str, Any]] | None = None) -> Tuple[Dict[str, Any], str]:
    """Vertex document and its pretty-printed JSON."""
    return _build(VERTEX_TEMPLATE, form, previous_references)


def build_edge_document(form: Dict[str, Any],
                        previous_references: List[Dict[str, Any]] | None = None) -> Tuple[Dict[str, Any], str]:
    """Edge document and its pretty-printed JSON."""
    return _build(EDGE_TEMPLATE, form, previous_references)
