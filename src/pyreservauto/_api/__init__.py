"""Reservauto endpoint modules."""
