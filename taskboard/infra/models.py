from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db import Base


class ProjectModel(Base):
    __tablename__ = "projects"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    color = Column(String(32), nullable=False, default="")
    icon = Column(String(64), nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)


class TaskModel(Base):
    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    priority = Column(Integer, nullable=False, default=2)
    # Soft reference: deleting a project leaves its tasks untouched.
    project_id = Column(Integer, nullable=True, index=True)
    deadline = Column(DateTime, nullable=True)
    completed = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    notes = relationship(
        "NoteModel",
        order_by="NoteModel.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    subtasks = relationship(
        "SubtaskModel",
        order_by="SubtaskModel.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class NoteModel(Base):
    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
    position = Column(Integer, nullable=False, default=0)


class SubtaskModel(Base):
    __tablename__ = "subtasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False)
    position = Column(Integer, nullable=False, default=0)
