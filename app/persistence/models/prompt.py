"""Prompt template and variable catalog models."""

from datetime import datetime
import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from app.persistence.database import Base


class TemplateStatus(str, enum.Enum):
    """Publication status of a prompt template."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PromptTemplate(Base):
    """Named prompt template with ``{{name}}`` placeholders."""

    __tablename__ = "prompt_templates"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, default="General")
    template = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    version = Column(String(50), nullable=False, default="1.0.0")
    tags = Column(JSON, nullable=False, default=list)
    status = Column(String(20), default=TemplateStatus.DRAFT.value, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    last_modified = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<PromptTemplate(id={self.id}, name={self.name}, is_default={self.is_default})>"


class PromptVariable(Base):
    """Variable catalog entry used for editor hints; never enforced."""

    __tablename__ = "prompt_variables"

    name = Column(String(100), primary_key=True)
    description = Column(Text, nullable=False)
    default_value = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<PromptVariable(name={self.name})>"
