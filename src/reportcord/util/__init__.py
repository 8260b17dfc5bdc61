"""
Utility functions and helpers for Reportcord.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Suppresses noise from
  Discord internals and HTTP libraries. Uses prompt_toolkit for console output.

- **discord_utils.py**: Low-level Discord API helpers including permission checks,
  safe message deletion, direct messages and file payload building. All functions
  are stateless for easy integration with higher-level bot components.
"""
