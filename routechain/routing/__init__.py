"""
Routing package for routechain.

Provides:
- Route class binding one method and path pattern to a handler chain
- Router class owning the ordered route table and middleware
- ChainRunner driving a chain with explicit continuations
- Pattern compilation and path normalization helpers
"""

from .chain import ChainRunner
from .paths import join_paths, normalize_path, parse_pathname
from .pattern import PatternMatcher, compile_pattern
from .route import Route
from .router import Router

__all__ = [
    "ChainRunner",
    "PatternMatcher",
    "Route",
    "Router",
    "compile_pattern",
    "join_paths",
    "normalize_path",
    "parse_pathname",
]
