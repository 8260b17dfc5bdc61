"""Typed data structures shared across Reportcord."""
