"""Main entry point when executing findapi as a package.

This allows running the package using python -m findapi.
"""

from findapi.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
