"""Logging setup for typedsettings and the programs using it."""
