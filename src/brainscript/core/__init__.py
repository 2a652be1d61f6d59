"""Core configuration for the BrainScript application."""
