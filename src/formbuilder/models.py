from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class FormModel(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    content = Column(Text, default="[]")
    share_url = Column(String, unique=True, index=True, nullable=False)
    published = Column(Boolean, default=False, nullable=False)
    visits = Column(Integer, default=0, nullable=False)
    submissions = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime)


class SubmissionModel(Base):
    __tablename__ = "form_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), index=True)
    content = Column(Text)
    created_at = Column(DateTime)
