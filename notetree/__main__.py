"""
Main CLI entry point with notebook and version commands registered.
"""
#!/usr/bin/env python3

import sys

from notetree.cli.commands import cli, register_notebook_commands, register_version_commands


def main():
    """Main entry point for the application"""
    register_notebook_commands(cli)

    # Register version control commands
    register_version_commands(cli)

    # Run the CLI
    return cli()


if __name__ == "__main__":
    sys.exit(main())
