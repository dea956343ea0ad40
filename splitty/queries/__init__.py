"""Query package."""

from splitty.queries.activity import ActivityFeed, all_tags

__all__ = ["ActivityFeed", "all_tags"]
