"""
Import Hooks

Synchronous extension points around searching, mapping and product
creation. Filters receive a value plus context arguments and return the
(possibly replaced) value; actions are called for their side effects.

Callbacks run in ascending priority order; callbacks with the same
priority run in registration order.

Usage:
    hooks = ImportHooks()
    hooks.add_filter("product_status", lambda status, release: "active")
    hooks.add_action("after_product_created", notify)

Available filters:
    search_results            (SearchPage)                        -> SearchPage
    before_create_product     (Release)                           -> Release
    product_status            (status, Release)                   -> str
    product_categories        (List[CategoryPath], Release)       -> List[CategoryPath]
    tracklist_format          (text, Release)                     -> str
    product_description       (html, Release)                     -> str
    product_short_description (text, Release)                     -> str

Available actions:
    before_search             (query, page)
    after_search              (query, page, SearchPage)
    before_product_created    (Release)
    after_product_created     (product_id, Release)
    before_meta_added         (product_id, Release)
    after_meta_added          (product_id, Release)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

FILTERS = frozenset({
    "search_results",
    "before_create_product",
    "product_status",
    "product_categories",
    "tracklist_format",
    "product_description",
    "product_short_description",
})

ACTIONS = frozenset({
    "before_search",
    "after_search",
    "before_product_created",
    "after_product_created",
    "before_meta_added",
    "after_meta_added",
})


@dataclass
class _Registration:
    priority: int
    sequence: int
    callback: Callable[..., Any]


class ImportHooks:
    """Registry of filter and action callbacks."""

    def __init__(self):
        self._filters: Dict[str, List[_Registration]] = {name: [] for name in FILTERS}
        self._actions: Dict[str, List[_Registration]] = {name: [] for name in ACTIONS}
        self._sequence = 0

    def _register(self, table: Dict[str, List[_Registration]], kind: str,
                  name: str, callback: Callable[..., Any], priority: int) -> None:
        if name not in table:
            raise ValueError(f"Unknown {kind} hook: {name}")
        if not callable(callback):
            raise TypeError(f"Hook callback for {name} is not callable")

        self._sequence += 1
        table[name].append(_Registration(priority, self._sequence, callback))
        table[name].sort(key=lambda r: (r.priority, r.sequence))

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        """Register a filter callback."""
        self._register(self._filters, "filter", name, callback, priority)

    def add_action(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        """Register an action callback."""
        self._register(self._actions, "action", name, callback, priority)

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> bool:
        """Unregister a filter callback. Returns True if it was registered."""
        return self._remove(self._filters, name, callback)

    def remove_action(self, name: str, callback: Callable[..., Any]) -> bool:
        """Unregister an action callback. Returns True if it was registered."""
        return self._remove(self._actions, name, callback)

    @staticmethod
    def _remove(table: Dict[str, List[_Registration]], name: str, callback: Callable[..., Any]) -> bool:
        registrations = table.get(name, [])
        for registration in registrations:
            if registration.callback is callback:
                registrations.remove(registration)
                return True
        return False

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def has_action(self, name: str) -> bool:
        return bool(self._actions.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass value through every filter registered under name."""
        if name not in self._filters:
            raise ValueError(f"Unknown filter hook: {name}")

        for registration in list(self._filters[name]):
            value = registration.callback(value, *args)
        return value

    def do_action(self, name: str, *args: Any) -> None:
        """Call every action registered under name."""
        if name not in self._actions:
            raise ValueError(f"Unknown action hook: {name}")

        registrations = list(self._actions[name])
        if registrations:
            logger.debug("Running %d callback(s) for %s", len(registrations), name)
        for registration in registrations:
            registration.callback(*args)
