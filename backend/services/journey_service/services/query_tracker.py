"""
Stale Query Suppression.

Each dashboard view (a project plus an optional client view key) gets a
monotonically increasing query token. A query that finishes after a newer one
was issued for the same view is stale and its result is discarded, so a slow
response never overwrites a faster, newer one.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class QueryGenerationTracker:
    """Hands out query tokens per view and tells whether a token is still current.

    Counters are only touched from the event loop thread, so no lock is taken.
    """

    def __init__(self) -> None:
        self._generations: dict[str, int] = {}

    def issue(self, view_key: str) -> int:
        """Issue a new token for a view, superseding every earlier one."""
        token = self._generations.get(view_key, 0) + 1
        self._generations[view_key] = token
        return token

    def current(self, view_key: str) -> int:
        """Latest token issued for a view, 0 when none was issued."""
        return self._generations.get(view_key, 0)

    def is_current(self, view_key: str, token: int) -> bool:
        return self._generations.get(view_key) == token

    async def run_latest(
        self,
        view_key: str,
        query_factory: Callable[[int], Awaitable[T]],
    ) -> T | None:
        """
        Run a query under a freshly issued token.

        Args:
            view_key: The view the query belongs to.
            query_factory: Called with the issued token, returns the query awaitable.

        Returns:
            The query result, or None when a newer query was issued for the same
            view while this one ran. Errors of a superseded query are discarded too.
        """
        token = self.issue(view_key)
        try:
            result = await query_factory(token)
        except Exception:
            if not self.is_current(view_key, token):
                logger.info(f"Discarding failed query {token} for view {view_key}, superseded")
                return None
            raise

        if not self.is_current(view_key, token):
            logger.info(
                f"Discarding stale result of query {token} for view {view_key} "
                f"(latest is {self.current(view_key)})"
            )
            return None
        return result


def build_view_key(project_id: str, view: str | None = None) -> str:
    """Combine a project id and an optional client view key."""
    return f"{project_id}:{view}" if view else project_id
