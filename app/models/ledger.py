from sqlalchemy import JSON, BigInteger, Column, ForeignKey, Integer, String, Text

from app.db.base import Base


class LedgerCommand(Base):
    """Append-only log of applied registry writes, one row per confirmed call."""

    __tablename__ = "ledger_commands"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    sender = Column(String(42), nullable=False)
    call = Column(Text, nullable=False)  # registerIdentity, updateIdentity, createEvent
    args = Column(JSON, nullable=False)
    timestamp = Column(BigInteger, nullable=False)


class LedgerNotification(Base):
    """Notifications emitted by applied writes, in emission order.

    Example:
    {
        "seq": 3,
        "command_seq": 2,
        "name": "EventCreated",
        "payload": {"id": 1, "owner": "0xf39F...", "title": "Aula 1"}
    }
    """

    __tablename__ = "ledger_notifications"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    command_seq = Column(Integer, ForeignKey("ledger_commands.seq"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False)
