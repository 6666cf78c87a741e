"""Command-line front end for asciify."""
