"""Adapters for the services the report desk depends on."""
