"""Relay actuator configuration."""
