"""
CLI main entry point.
"""


def main() -> int:
    """
    Main entry point for the remoteadmin CLI.

    Returns:
        int: Exit code
    """
    # Import here to avoid circular imports
    from .orchestrator import app

    try:
        app()
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0
