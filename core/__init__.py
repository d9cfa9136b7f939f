"""Polytrade operations core - domain, application, infrastructure, settings."""
