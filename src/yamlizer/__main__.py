"""
Entry point for the yamlizer CLI.

Usage:
    python -m yamlizer load config.yml --type myapp.config:Settings
"""

from .cli import main

if __name__ == "__main__":
    main()
