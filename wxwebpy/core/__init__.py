"""Core modules for wxwebpy."""
