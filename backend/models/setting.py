# backend/models/setting.py
from sqlalchemy import Column, String, Text
from database import Base


# Key/value store for operator-editable settings (shipping, tax, store details)
class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
