"""Runtime configuration schemas."""

from pydantic import BaseModel
from typing import Optional, List, Union


class ConfigUpdateRequest(BaseModel):
    """Request to update a configuration value."""
    value: str


class ConfigItem(BaseModel):
    """Configuration item response."""
    key: str
    value: Optional[Union[bool, int, str]] = None
    value_type: str
    description: Optional[str] = None
    category: Optional[str] = None
    source: str  # 'default' or 'database'
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None


class ConfigListResponse(BaseModel):
    """Response for configuration list."""
    configs: List[ConfigItem]
    categories: List[str]
