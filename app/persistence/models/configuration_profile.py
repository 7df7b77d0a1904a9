"""Configuration profile model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from app.persistence.database import Base
from app.persistence.types import EncryptedJSON


class ConfigurationProfile(Base):
    """A named bundle of the four widget/AI configuration sections."""

    __tablename__ = "configuration_profiles"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    version = Column(Integer, default=1, nullable=False)

    # Each section is stored as a JSON object of setting name -> value
    widget_appearance = Column(JSON, nullable=False, default=dict)
    knowledge_base = Column(JSON, nullable=False, default=dict)
    ai_model = Column(EncryptedJSON(secret_keys=("api_key",)), nullable=False, default=dict)
    response_formatting = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # UPDATE and DELETE match on the loaded version; UPDATE also bumps it
    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<ConfigurationProfile(id={self.id}, name={self.name}, is_active={self.is_active})>"
