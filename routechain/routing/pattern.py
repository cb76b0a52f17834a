"""
Pattern compiler for routechain.

Turns a path template such as ``/users/:user_id/posts/:post_id(\\d+)`` into a
``PatternMatcher`` exposing ``test``/``exec`` and the ordered parameter names.
"""

import re
from typing import List, Optional, Tuple

from ..exceptions import InvalidPattern

_NAME_START = re.compile(r"[A-Za-z_]")
_NAME_CHARS = re.compile(r"[A-Za-z0-9_]")
DEFAULT_PARAM_REGEX = r"[^/]+?"


class PatternMatcher:
    """
    Compiled form of a path pattern.

    Supported syntax:
        - Literal segments: ``/users`` (matched case-insensitively)
        - Named parameters: ``/:user_id`` (exactly one non-empty segment)
        - Constrained parameters: ``/:user_id(\\d+)``
        - Optional parameters: ``/:page?`` (may be absent with its leading ``/``)

    A single trailing ``/`` in the tested path is tolerated.

    Attributes:
        pattern (str): The pattern this matcher was compiled from.
        regex (re.Pattern): The compiled regular expression.
        param_names (Tuple[str, ...]): Parameter names in declaration order.
    """

    __slots__ = ("pattern", "regex", "param_names")

    def __init__(self, pattern: str, regex: "re.Pattern[str]", param_names: Tuple[str, ...]):
        self.pattern = pattern
        self.regex = regex
        self.param_names = param_names

    def test(self, path: str) -> bool:
        """Return True if ``path`` satisfies the pattern."""
        return self.regex.match(path) is not None

    def exec(self, path: str) -> Optional[Tuple[Optional[str], ...]]:
        """
        Match ``path`` and return the captures in ``param_names`` order.

        Returns:
            A tuple of captured strings (``None`` for an absent optional
            parameter), or None when the path does not match.
        """
        match = self.regex.match(path)
        if match is None:
            return None
        return tuple(match.group(_group_name(i)) for i in range(len(self.param_names)))

    def __repr__(self) -> str:
        return f"<PatternMatcher {self.pattern!r} params={list(self.param_names)}>"


def _group_name(index: int) -> str:
    return f"p{index}"


def compile_pattern(pattern: str) -> PatternMatcher:
    """
    Compile a path pattern into a ``PatternMatcher``.

    Args:
        pattern: Path template, normally already normalized.

    Returns:
        The compiled matcher.

    Raises:
        InvalidPattern: On duplicate parameter names, unbalanced constraint
                        parentheses or a constraint that is not a valid regex.
    """
    regex_parts: List[str] = []
    param_names: List[str] = []

    i = 0
    literal_start = 0
    while i < len(pattern):
        if pattern[i] == ":" and i + 1 < len(pattern) and _NAME_START.match(pattern[i + 1]):
            literal = pattern[literal_start:i]
            i, name, constraint, optional = _parse_parameter(pattern, i)

            if name in param_names:
                raise InvalidPattern(pattern, f"duplicate parameter name {name!r}")

            group = f"(?P<{_group_name(len(param_names))}>{constraint})"
            if optional and literal.endswith("/"):
                regex_parts.append(re.escape(literal[:-1]))
                regex_parts.append(f"(?:/{group})?")
            else:
                regex_parts.append(re.escape(literal))
                regex_parts.append(f"{group}?" if optional else group)

            param_names.append(name)
            literal_start = i
        else:
            i += 1

    tail = pattern[literal_start:]
    if (len(tail) > 1 and tail.endswith("/")) or (tail == "/" and regex_parts):
        tail = tail[:-1]
    regex_parts.append(re.escape(tail))

    source = "^" + "".join(regex_parts) + "/?$"
    try:
        regex = re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc

    return PatternMatcher(pattern, regex, tuple(param_names))


def _parse_parameter(pattern: str, index: int) -> Tuple[int, str, str, bool]:
    """
    Parse the parameter starting at ``pattern[index] == ":"``.

    Returns:
        Tuple of (index after the parameter, name, capture regex, optional)
    """
    end = index + 1
    while end < len(pattern) and _NAME_CHARS.match(pattern[end]):
        end += 1
    name = pattern[index + 1 : end]

    constraint = DEFAULT_PARAM_REGEX
    if end < len(pattern) and pattern[end] == "(":
        depth = 0
        close = end
        while close < len(pattern):
            char = pattern[close]
            if char == "\\":
                close += 2
                continue
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    break
            close += 1
        else:
            raise InvalidPattern(pattern, f"unclosed constraint for parameter {name!r}")

        constraint = pattern[end + 1 : close]
        if not constraint:
            raise InvalidPattern(pattern, f"empty constraint for parameter {name!r}")
        # user groups must not shift the named captures
        constraint = f"(?:{constraint})"
        end = close + 1

    optional = end < len(pattern) and pattern[end] == "?"
    if optional:
        end += 1

    return end, name, constraint, optional
