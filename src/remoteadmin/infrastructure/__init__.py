"""
Infrastructure layer: WinRM/PowerShell execution, configuration files, logging.
"""
