import logging

from sqlalchemy.orm import Session

from store import CounterStore

logger = logging.getLogger(__name__)

# Primary key of the singleton counter row
COUNTER_ID = 1


class VisitService:

    def __init__(self, session: Session):
        self.session = session
        self.store = CounterStore(session)

    def increment_and_get_count(self) -> int:
        try:
            count = self.store.increment(COUNTER_ID)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.debug("New visitor, count is now %d", count)
        return count

    def get_current_count(self) -> int:
        counter = self.store.get(COUNTER_ID)
        if counter is None:
            return 0
        return counter.count
