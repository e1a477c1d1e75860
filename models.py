from sqlalchemy import BigInteger, Column, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class VisitorCount(Base):
    __tablename__ = 'visitor_count'
    id = Column(Integer, primary_key=True)
    count = Column(BigInteger, nullable=False, default=0)
