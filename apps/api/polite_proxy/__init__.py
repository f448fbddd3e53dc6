"""Polite proxy: rewrite chat messages through an LLM before they are stored."""
