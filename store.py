from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import VisitorCount


class CounterStore:
    """Single-row access to the ``visitor_count`` table.

    ``save`` writes a row as given, for seeding or restoring a count;
    request handling only goes through ``get`` and ``increment``.
    """

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: int) -> Optional[VisitorCount]:
        return self.session.get(VisitorCount, key)

    def save(self, counter: VisitorCount) -> VisitorCount:
        counter = self.session.merge(counter)
        self.session.flush()
        return counter

    def increment(self, key: int) -> int:
        """Add one to the counter row in the database and return the new value.

        The row is created with a count of 1 when it does not exist yet. A
        concurrent transaction may insert it first, in which case the insert
        is rolled back to its savepoint and the update is run again.
        """
        count = self._add_one(key)
        if count is not None:
            return count

        try:
            with self.session.begin_nested():
                self.session.add(VisitorCount(id=key, count=1))
            return 1
        except IntegrityError:
            count = self._add_one(key)
            if count is None:
                raise
            return count

    def _add_one(self, key: int) -> Optional[int]:
        return self.session.execute(
            update(VisitorCount)
            .where(VisitorCount.id == key)
            .values(count=VisitorCount.count + 1)
            .returning(VisitorCount.count)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()
