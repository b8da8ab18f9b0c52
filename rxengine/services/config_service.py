"""Configuration service for dynamic settings management."""

import logging
from typing import Any, Optional, Dict, List, Tuple
from sqlalchemy.orm import Session
from datetime import datetime

from rxengine.models.system_config import SystemConfig
from rxengine.utils.timezone import utcnow

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing dynamic configuration settings."""

    _cache: Dict[str, Tuple[str, str]] = {}
    _cache_timestamp: Optional[datetime] = None
    _cache_ttl_seconds: int = 60  # Refresh cache every 60 seconds

    def __init__(self, db: Session):
        self.db = db

    @classmethod
    def invalidate_cache(cls):
        """Drop cached values so the next read goes to the database."""
        cls._cache = {}
        cls._cache_timestamp = None

    def _should_refresh_cache(self) -> bool:
        """Check if cache should be refreshed."""
        if not ConfigService._cache_timestamp:
            return True
        elapsed = (utcnow() - ConfigService._cache_timestamp).total_seconds()
        return elapsed > ConfigService._cache_ttl_seconds

    def _refresh_cache(self):
        """Refresh the configuration cache from database."""
        try:
            configs = self.db.query(SystemConfig).all()
            ConfigService._cache = {c.key: (c.value, c.value_type) for c in configs}
            ConfigService._cache_timestamp = utcnow()
        except Exception as e:
            logger.warning(f"Failed to refresh config cache: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Priority:
        1. Database value (if exists)
        2. Default from SystemConfig.DEFAULTS
        3. Provided default parameter
        """
        if self._should_refresh_cache():
            self._refresh_cache()

        cached = ConfigService._cache.get(key)
        if cached:
            return self._convert_value(*cached)

        if key in SystemConfig.DEFAULTS:
            default_config = SystemConfig.DEFAULTS[key]
            return self._convert_value(default_config["value"], default_config["value_type"])

        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Get an integer configuration value."""
        value = self.get(key, default)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean configuration value."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    def _convert_value(self, value: str, value_type: str) -> Any:
        """Convert string value to appropriate type."""
        if value is None:
            return None

        try:
            if value_type == "int":
                return int(value)
            elif value_type == "bool":
                return value.lower() in ("true", "1", "yes", "on")
            else:
                return value
        except ValueError:
            return value

    def set(self, key: str, value: Any, updated_by: str = "system") -> bool:
        """Set a configuration value."""
        if isinstance(value, bool):
            value = "true" if value else "false"

        try:
            config = self.db.query(SystemConfig).filter(SystemConfig.key == key).first()

            if config:
                config.value = str(value)
                config.updated_by = updated_by
            else:
                defaults = SystemConfig.DEFAULTS.get(key, {})
                config = SystemConfig(
                    key=key,
                    value=str(value),
                    value_type=defaults.get("value_type", "string"),
                    description=defaults.get("description", ""),
                    category=defaults.get("category", "general"),
                    updated_by=updated_by
                )
                self.db.add(config)

            self.db.commit()
            ConfigService.invalidate_cache()
            return True
        except Exception as e:
            logger.error(f"Failed to set config {key}: {e}")
            self.db.rollback()
            return False

    def get_all(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get all configuration settings, optionally filtered by category."""
        all_configs = {}

        # Add defaults first
        for key, default in SystemConfig.DEFAULTS.items():
            if category and default.get("category") != category:
                continue
            all_configs[key] = {
                "key": key,
                "value": self._convert_value(default["value"], default["value_type"]),
                "value_type": default["value_type"],
                "description": default["description"],
                "category": default["category"],
                "source": "default",
                "updated_at": None,
                "updated_by": None
            }

        # Override with database values
        query = self.db.query(SystemConfig)
        if category:
            query = query.filter(SystemConfig.category == category)

        for config in query.all():
            all_configs[config.key] = {
                "key": config.key,
                "value": self._convert_value(config.value, config.value_type or "string"),
                "value_type": config.value_type or "string",
                "description": config.description,
                "category": config.category,
                "source": "database",
                "updated_at": config.updated_at.isoformat() if config.updated_at else None,
                "updated_by": config.updated_by
            }

        return sorted(all_configs.values(), key=lambda c: (c["category"] or "", c["key"]))

    def get_categories(self) -> List[str]:
        """Get list of all configuration categories."""
        categories = set()
        for default in SystemConfig.DEFAULTS.values():
            if default.get("category"):
                categories.add(default["category"])
        return sorted(categories)

    def initialize_defaults(self):
        """Initialize database with default values if not present."""
        for key, default in SystemConfig.DEFAULTS.items():
            existing = self.db.query(SystemConfig).filter(SystemConfig.key == key).first()
            if not existing:
                self.db.add(SystemConfig(
                    key=key,
                    value=default["value"],
                    value_type=default["value_type"],
                    description=default["description"],
                    category=default["category"],
                    updated_by="system"
                ))
        self.db.commit()
        ConfigService.invalidate_cache()
        logger.info("Configuration defaults initialized")
