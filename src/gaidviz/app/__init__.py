"""Standalone dashboard application."""
