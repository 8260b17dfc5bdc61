"""
Configuration management for Reportcord.

- **app_configuration.py**: YAML configuration loader for global settings with
  fcntl-guarded reads. Falls back gracefully on missing or malformed config files.

- **report_settings.py**: Typed accessors for the ``reports`` section (moderation
  channel, moderator role, report emoji, excerpt and download limits) with
  environment variable overrides.
"""
