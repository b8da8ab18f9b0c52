"""API routers for the Prescription Lifecycle Service."""

from rxengine.routers import prescriptions, admin_prescriptions, admin_config

__all__ = ["prescriptions", "admin_prescriptions", "admin_config"]
