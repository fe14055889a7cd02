"""Command modules registered on the jjstack Typer app."""
