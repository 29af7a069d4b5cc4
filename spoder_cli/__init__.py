"""Command-line front end for spoder."""
