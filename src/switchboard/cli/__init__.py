"""Interactive and single-shot command-line front end."""
