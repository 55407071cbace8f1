"""Reminder Plus shared Lambda layer."""
