"""Read helpers over Protean repositories."""

from protean.utils.globals import current_domain

PAGE_SIZE = 100


def fetch_all(aggregate_cls, **filters) -> list:
    """Load every record matching ``filters``, page by page.

    Protean query sets are capped at a default page size, so a single
    ``.all()`` can silently truncate large result sets.
    """
    dao = current_domain.repository_for(aggregate_cls)._dao
    records = []
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        page = query.offset(offset).limit(PAGE_SIZE).all()
        records.extend(page.items)
        offset += PAGE_SIZE
        if not page.items or offset >= page.total:
            return records
