from sqlalchemy import BigInteger, Column, Integer, String, Text

from app.db.base import Base


class Identity(Base):
    """Model for the identity registry

    Example:
    {
        "seq": 1,
        "account": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "name": "Alice",
        "matricula": "2023001",
        "curso": "Redes",
        "created_at": 1700000000
    }
    """

    __tablename__ = "identities"

    seq = Column(Integer, primary_key=True, autoincrement=True)  # registration order
    account = Column(String(42), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    matricula = Column(Text, nullable=False, unique=True)
    curso = Column(Text, nullable=False)
    created_at = Column(BigInteger, nullable=False)
