"""SQLAlchemy Core table definitions for the bootcfg store."""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

groups = Table(
    "groups",
    metadata,
    Column("name", Text, primary_key=True),
    Column("position", Integer, nullable=False),  # document order
    Column("spec", Text, nullable=False),
    Column("require", Text, nullable=False),  # JSON object
    Column("metadata", Text, nullable=False),  # JSON object
    Column("created", Text, nullable=False),
)

Index("ix_groups_position", groups.c.position)
