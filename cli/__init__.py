"""Command-line front end for the reading tree; the Typer app is ``cli.app.app``."""
