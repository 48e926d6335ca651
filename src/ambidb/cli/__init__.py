"""Typer command-line interface for ambidb."""
