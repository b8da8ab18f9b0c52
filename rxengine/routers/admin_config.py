"""Runtime configuration API endpoints for admins."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from rxengine.database import get_db
from rxengine.models.system_config import SystemConfig
from rxengine.schemas.config import ConfigItem, ConfigListResponse, ConfigUpdateRequest
from rxengine.services.auth_service import require_admin
from rxengine.services.config_service import ConfigService

router = APIRouter()
logger = logging.getLogger(__name__)

REMINDER_CHANNELS = ("email", "sms", "push")
BOOL_VALUES = ("true", "false", "1", "0", "yes", "no", "on", "off")


def _validate_value(key: str, value: str) -> str:
    """Check a submitted value against the type of its setting."""
    value_type = SystemConfig.DEFAULTS[key]["value_type"]
    value = value.strip()

    if value_type == "int":
        if not value.isdigit() or int(value) < 1:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"'{key}' must be a positive whole number"
            )
    elif value_type == "bool":
        if value.lower() not in BOOL_VALUES:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"'{key}' must be true or false"
            )
    elif key == "REMINDER_DEFAULT_CHANNEL" and value not in REMINDER_CHANNELS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"'{key}' must be one of: {', '.join(REMINDER_CHANNELS)}"
        )

    return value


@router.get("", response_model=ConfigListResponse)
async def get_all_configs(
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """Get all runtime settings. Requires admin role."""
    config_service = ConfigService(db)
    return ConfigListResponse(
        configs=[ConfigItem(**c) for c in config_service.get_all(category=category)],
        categories=config_service.get_categories()
    )


@router.get("/{key}")
async def get_config(
    key: str,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """Get a specific configuration value."""
    if key not in SystemConfig.DEFAULTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration key '{key}' not found"
        )

    return {"key": key, "value": ConfigService(db).get(key)}


@router.put("/{key}")
async def update_config(
    key: str,
    request: ConfigUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: dict = Depends(require_admin)
):
    """Update a configuration value. Requires admin role."""
    if key not in SystemConfig.DEFAULTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Configuration key '{key}' not found"
        )

    value = _validate_value(key, request.value)

    config_service = ConfigService(db)
    if not config_service.set(key, value, updated_by=admin_user["user_email"]):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update configuration"
        )

    logger.info(f"Configuration '{key}' updated to '{value}' by {admin_user['user_email']}")

    return {
        "status": "success",
        "key": key,
        "value": config_service.get(key)
    }
