"""Shared schemas for the workspace dashboard."""
