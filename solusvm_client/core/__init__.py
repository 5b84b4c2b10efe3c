"""Core SolusVM client and action registry."""
