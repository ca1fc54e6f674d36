# This file handles offset pagination for list endpoints.
# Both search paths derive their skip/limit window and page count from these helpers.
# Pages past the end are valid and simply produce an empty slice, including windows
# whose offset does not fit a 64-bit SQL integer.

from __future__ import annotations

from dataclasses import dataclass

MAX_SQL_INTEGER = 2**63 - 1


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    limit: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def fits_sql_range(self) -> bool:
        """Whether OFFSET and OFFSET + LIMIT are both representable as BIGINT."""

        return self.offset <= MAX_SQL_INTEGER - self.limit


def compute_total_pages(*, total_count: int, limit: int) -> int:
    """Compute deterministic total page count."""

    if total_count <= 0:
        return 0
    return ((total_count - 1) // limit) + 1


def build_pagination_metadata(*, total_count: int, pagination: PaginationSpec) -> dict[str, int]:
    return {
        "total": total_count,
        "page": pagination.page,
        "limit": pagination.limit,
        "pages": compute_total_pages(total_count=total_count, limit=pagination.limit),
    }
