# context_dumper/main.py
"""Main entry point for the context-dumper CLI application."""

from context_dumper.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="context-dumper")

if __name__ == '__main__':
    entrypoint()
