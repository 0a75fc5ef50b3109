"""Configuration, domain models and utilities shared by every Matchday component."""
