"""
Payload parsers.

Each parser turns a raw response body into a flat-ish key/value dict the
adapter's extractor functions can read, or raises ParseError. The normalizer
catches ParseError and converts it into a failed Result, so a parser never
needs to guess what a garbage body meant.
"""

from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional, Union
from urllib.parse import unquote_plus


class ParseError(Exception):
    """Raised when a body is not in the format the adapter expects."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


def normalize_field(value: Optional[str]) -> Union[str, bool, None]:
    """
    Coerce the stringly-typed values delimited gateways send back.

    "true"/"false" become booleans, "" and "null" become None.
    """
    if value == "true":
        return True
    if value == "false":
        return False
    if value in ("", "null"):
        return None
    return value


def parse_json(body: Optional[str]) -> Dict[str, Any]:
    """
    Parse a JSON body.

    A blank body is an empty payload; a bare JSON string or number is wrapped
    as {"message": value} so extractors always receive a dict.

    Raises:
        ParseError: If the body is not valid JSON
    """
    if body is None or not body.strip():
        return {}
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", body) from e
    if not isinstance(parsed, dict):
        return {"message": parsed}
    return parsed


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def underscore(name: str) -> str:
    """TransactionID -> transaction_id, avs-result -> avs_result."""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def _strip_namespace(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _flatten(element: ET.Element, into: Dict[str, Any]) -> None:
    for child in element:
        key = underscore(_strip_namespace(child.tag))
        if len(child):
            _flatten(child, into)
        else:
            text = (child.text or "").strip()
            into[key] = text or None
        for attr, value in child.attrib.items():
            into[f"{key}_{underscore(_strip_namespace(attr))}"] = value


def parse_xml(body: Optional[str]) -> Dict[str, Any]:
    """
    Parse an XML body into a dict keyed by snake_case leaf tag names.

    Nested containers are flattened: the leaves of <Response><Card><Avs>Y</Avs>
    </Card></Response> land at {"avs": "Y"}. Later duplicates win. Attributes
    are kept as "<tag>_<attribute>".

    Raises:
        ParseError: If the body is blank or not well-formed XML
    """
    if body is None or not body.strip():
        raise ParseError("Empty XML body", body)
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise ParseError(f"Invalid XML: {e}", body) from e

    payload: Dict[str, Any] = {}
    if len(root):
        _flatten(root, payload)
    else:
        payload[underscore(_strip_namespace(root.tag))] = (root.text or "").strip() or None
    return payload


def parse_delimited(
    body: Optional[str],
    pair_separator: str = "&",
    key_separator: str = "=",
) -> Dict[str, Any]:
    """
    Parse a delimited key/value body such as "status=Approved&ref_num=123".

    Keys and values are url-decoded; values pass through normalize_field().

    Raises:
        ParseError: If a non-blank segment has no key separator
    """
    payload: Dict[str, Any] = {}
    if body is None:
        return payload

    for segment in body.strip().split(pair_separator):
        if not segment.strip():
            continue
        if key_separator not in segment:
            raise ParseError(f"Malformed segment {segment!r}", body)
        key, value = segment.split(key_separator, 1)
        payload[unquote_plus(key.strip())] = normalize_field(unquote_plus(value))
    return payload
