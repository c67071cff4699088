from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from enru.database import Base


class EnRuEntry(Base):
    __tablename__ = "enRu"
    __table_args__ = (Index("ix_enru_word", "word"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(Text, nullable=False)
    translation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transcription: Mapped[Optional[str]] = mapped_column(Text)
    stress: Mapped[Optional[str]] = mapped_column(Text)
    popularity: Mapped[Optional[float]] = mapped_column(Float)


class RuEnEntry(Base):
    __tablename__ = "ruEn"
    __table_args__ = (Index("ix_ruen_word", "word"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(Text, nullable=False)
    translation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    stress: Mapped[Optional[str]] = mapped_column(Text)
    popularity: Mapped[Optional[float]] = mapped_column(Float)
