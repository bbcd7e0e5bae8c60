"""
CLI Subpackage.

Contains the entry-point and command handlers for the command-line interface.

Modules:
    - ``__main__``: The argparse definition and dispatcher.
    - ``commands``: Top-level facade for command handlers.
    - ``resolve``: Turns command-line targets into live objects.
    - ``handlers/*``: Implementation modules for each command group.
"""
