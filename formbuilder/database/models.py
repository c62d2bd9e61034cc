"""
Database Models

Document-shaped tables: each row keeps its nested content (questions, answer
payloads) in a JSON column, mirroring how the records are exchanged over the
API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class FormRecord(Base):
    """
    Stored form.

    ``system_id`` is assigned on insert; ``slug`` is an optional human-chosen
    identifier. A form is addressable by either.
    """
    __tablename__ = "forms"

    system_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    slug: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True, nullable=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    questions: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ResponseRecord(Base):
    """Stored respondent submission. Rows are never updated."""
    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    form_id: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    answers: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
