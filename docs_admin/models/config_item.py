from sqlalchemy import JSON, Column, DateTime, String

from docs_admin.database import Base


class ConfigItem(Base):
    __tablename__ = "config_items"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
