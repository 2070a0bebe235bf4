from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jokes_api.db import Base


class JokeRecord(Base):
    __tablename__ = "jokes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
