"""Orchestration and normalization core."""
from .authorization import DELIMITER, AuthorizationSchema, decode, encode
from .multi_response import MultiResponse, RunPolicy, RunResult, Step, run
from .normalizer import Extractors, ResponseNormalizer
from .parsers import ParseError, parse_delimited, parse_json, parse_xml

__all__ = [
    "DELIMITER",
    "AuthorizationSchema",
    "Extractors",
    "MultiResponse",
    "ParseError",
    "ResponseNormalizer",
    "RunPolicy",
    "RunResult",
    "Step",
    "decode",
    "encode",
    "parse_delimited",
    "parse_json",
    "parse_xml",
    "run",
]
