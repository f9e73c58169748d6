from sqlalchemy import BigInteger, Column, Integer, String, Text

from app.db.base import Base

# largest value a signed 64-bit INTEGER column holds
MAX_LEDGER_INT = 2**63 - 1


class Event(Base):
    """Model for the event storage

    Example:
    {
        "id": 1,
        "owner": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "title": "Aula 1",
        "description": "Intro",
        "event_date": 1700000000,
        "created_at": 1700000100
    }
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=False)  # assigned by the registry
    owner = Column(String(42), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(BigInteger, nullable=False, default=0)
    created_at = Column(BigInteger, nullable=False)
