"""Snapshot JIRA epics and derive planning-status reports."""

__version__ = "0.1.0"
