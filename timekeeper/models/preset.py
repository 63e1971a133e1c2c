"""Preset model"""
from pydantic import BaseModel, ConfigDict


class Preset(BaseModel):
    """Named sequence template"""
    model_config = ConfigDict(frozen=True)

    name: str
    pattern: str
    description: str = ""
