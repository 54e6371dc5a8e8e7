"""
Throttle rules and the registry that matches outgoing requests against them.

A rule is keyed by HTTP method and path shape. Path templates use ``:name`` or
``{name}`` placeholders, each matching exactly one path segment:

    /meetings/:meetingId
    /users/{userId}/meetings

Templates that normalise to the same shape (``/meetings/*``) share an identity,
so registering one overwrites the other.
"""
import re
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from zoom_dispatch.exceptions import RuleError
from zoom_dispatch.logging_config import get_logger

logger = get_logger(__name__)

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
_COLON_PLACEHOLDER = re.compile(rf"^:{_NAME}$")
_BRACE_PLACEHOLDER = re.compile(rf"^\{{{_NAME}\}}$")


def normalize_method(method: str) -> str:
    """Upper-case an HTTP verb, rejecting anything that is not one."""
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        raise RuleError(f"Unsupported HTTP method: {method!r}")
    return method.upper()


def normalize_path(path: str) -> str:
    """Drop the query string and any trailing slash from a concrete path."""
    path = path.split("?", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _parse_segment(template: str, segment: str) -> Optional[str]:
    """Return the literal text of a segment, or None for a placeholder."""
    if not segment:
        raise RuleError(f"Empty path segment in template {template!r}")
    if "{" in segment or "}" in segment:
        if not _BRACE_PLACEHOLDER.match(segment):
            raise RuleError(f"Unmatched placeholder delimiters in {segment!r} of template {template!r}")
        return None
    if segment.startswith(":"):
        if not _COLON_PLACEHOLDER.match(segment):
            raise RuleError(f"Invalid placeholder name {segment!r} in template {template!r}")
        return None
    if "*" in segment:
        # "*" marks placeholders in rule shapes
        raise RuleError(f"Literal segment {segment!r} of template {template!r} cannot contain '*'")
    return segment


@dataclass(frozen=True)
class CompiledMatcher:
    """Immutable matcher derived from a path template."""
    template: str
    segments: Tuple[Optional[str], ...]
    pattern: re.Pattern = field(compare=False, repr=False)

    @property
    def shape(self) -> str:
        """Normalised form shared by templates that collide, e.g. ``/meetings/*``."""
        return "/" + "/".join("*" if seg is None else seg for seg in self.segments)

    @property
    def specificity(self) -> Tuple[int, Tuple[bool, ...]]:
        """Sort key: more literal segments first, then literals earlier in the path."""
        literal_mask = tuple(seg is not None for seg in self.segments)
        return sum(literal_mask), literal_mask

    def matches(self, path: str) -> bool:
        return self.pattern.match(normalize_path(path)) is not None


def compile_template(template: str) -> CompiledMatcher:
    """
    Compile a path template into a matcher.

    Args:
        template: Path template such as ``/meetings/:meetingId/recordings``

    Returns:
        CompiledMatcher for the template

    Raises:
        RuleError: If the template is empty, relative or has malformed placeholders
    """
    if not isinstance(template, str) or not template.startswith("/"):
        raise RuleError(f"Path template must start with '/': {template!r}")
    if "?" in template:
        raise RuleError(f"Path template cannot contain a query string: {template!r}")

    body = template.strip("/")
    segments = tuple(_parse_segment(template, seg) for seg in body.split("/")) if body else ()

    regex = "".join(
        "/[^/]+" if seg is None else "/" + re.escape(seg)
        for seg in segments
    ) or "/"
    return CompiledMatcher(template=template, segments=segments, pattern=re.compile(f"^{regex}$"))


@dataclass(frozen=True)
class ThrottleRule:
    """Allow at most max_requests_per_window matching requests per window."""
    method: str
    path_template: str
    window_duration_ms: int
    max_requests_per_window: int
    matcher: CompiledMatcher = field(compare=False, repr=False)

    def __post_init__(self):
        for name in ("window_duration_ms", "max_requests_per_window"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise RuleError(f"{name} must be a positive integer, got {value!r}")

    @property
    def key(self) -> str:
        """Identity of the rule, also used to key its request window."""
        return f"{self.method} {self.matcher.shape}"


class RuleRegistry:
    """
    Stores throttle rules and resolves requests to the most specific one.

    Rules are written rarely (usually at startup) and read on every request,
    so writes replace an immutable snapshot under a lock and reads never lock.
    """

    def __init__(self):
        self._write_lock = threading.Lock()
        self._rules: Dict[str, ThrottleRule] = {}

    def add_rule(
        self,
        method: str,
        path_template: str,
        window_duration_ms: int,
        max_requests_per_window: int,
    ) -> ThrottleRule:
        """
        Register a rule, overwriting any rule with the same method and path shape.

        Args:
            method: HTTP verb the rule applies to
            path_template: Path template with ``:name`` or ``{name}`` placeholders
            window_duration_ms: Length of the counting window in milliseconds
            max_requests_per_window: Requests admitted per window

        Returns:
            The registered rule

        Raises:
            RuleError: If the template or limits are malformed
        """
        rule = ThrottleRule(
            method=normalize_method(method),
            path_template=path_template,
            window_duration_ms=window_duration_ms,
            max_requests_per_window=max_requests_per_window,
            matcher=compile_template(path_template),
        )

        with self._write_lock:
            rules = dict(self._rules)
            replaced = rules.get(rule.key)
            rules[rule.key] = rule
            self._rules = rules

        logger.debug(
            "throttle_rule_registered",
            rule=rule.key,
            window_duration_ms=window_duration_ms,
            max_requests_per_window=max_requests_per_window,
            replaced=replaced is not None
        )
        return rule

    def resolve(self, method: str, path: str) -> Optional[ThrottleRule]:
        """
        Find the rule governing a request.

        Args:
            method: HTTP verb of the request
            path: Concrete request path, optionally with a query string

        Returns:
            The most specific matching rule, or None when the request is unthrottled
        """
        rules = self._rules
        method = method.upper()
        concrete = normalize_path(path)

        best = None
        for rule in rules.values():
            if rule.method != method or not rule.matcher.matches(concrete):
                continue
            if best is None or rule.matcher.specificity > best.matcher.specificity:
                best = rule
        return best

    @property
    def rules(self) -> List[ThrottleRule]:
        return list(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)
