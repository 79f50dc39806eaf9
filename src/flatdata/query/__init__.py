"""Query cursor and filter operators."""

from flatdata.query.cursor import CursorState, QueryCursor
from flatdata.query.filters import FilterOperator, compare, loose_equals, matches, strict_equals

__all__ = [
    "CursorState",
    "FilterOperator",
    "QueryCursor",
    "compare",
    "loose_equals",
    "matches",
    "strict_equals",
]
