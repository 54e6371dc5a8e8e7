"""
Admission control: decides whether a request may go out now.
"""
from dataclasses import dataclass
from typing import Optional, Union

from zoom_dispatch.rules import RuleRegistry, ThrottleRule
from zoom_dispatch.window import WindowCounter


@dataclass(frozen=True)
class Allow:
    """Request admitted. rule is None for unthrottled requests."""
    rule: Optional[ThrottleRule] = None
    count: Optional[int] = None


@dataclass(frozen=True)
class Delay:
    """Request may proceed after duration_ms."""
    duration_ms: int
    rule: Optional[ThrottleRule] = None


@dataclass(frozen=True)
class Reject:
    """Rule capacity exhausted until the current window ends."""
    retry_after_ms: int
    rule: ThrottleRule


Decision = Union[Allow, Delay, Reject]


class Governor:
    """
    Combines the rule registry and window counters into admit/reject decisions.

    The governor never sleeps or awaits. A read-check-increment for one rule
    happens under that rule's lock only, so requests for different rules never
    contend and concurrent requests for one rule are never over-admitted.
    One governor is shared by every endpoint category of a client.
    """

    def __init__(self, registry: RuleRegistry = None, counter: WindowCounter = None):
        self.registry = registry if registry is not None else RuleRegistry()
        self.counter = counter if counter is not None else WindowCounter()

    def add_rule(self, method: str, path_template: str, window_duration_ms: int, max_requests_per_window: int) -> ThrottleRule:
        """Register a throttle rule; see RuleRegistry.add_rule."""
        return self.registry.add_rule(method, path_template, window_duration_ms, max_requests_per_window)

    def admit(self, method: str, path: str) -> Decision:
        """
        Decide whether a request may be sent.

        Args:
            method: HTTP verb
            path: Concrete request path

        Returns:
            Allow when the request is unthrottled or under capacity, otherwise
            Reject carrying the time left in the rule's window
        """
        rule = self.registry.resolve(method, path)
        if rule is None:
            return Allow()

        with self.counter.guard(rule.key):
            count, remaining_ms = self.counter.peek(rule.key, rule.window_duration_ms)
            if count < rule.max_requests_per_window:
                count = self.counter.increment(rule.key, rule.window_duration_ms)
                return Allow(rule=rule, count=count)

        return Reject(retry_after_ms=remaining_ms, rule=rule)
