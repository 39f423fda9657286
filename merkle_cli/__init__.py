"""
merkle-commit CLI

Command-line interface over merkle_core.

Usage:
    python -m merkle_cli build Alice Bob Charlie
    python -m merkle_cli build Alice Bob Charlie --dump-out tree.json
    python -m merkle_cli prove tree.json --index 1
    python -m merkle_cli verify --root 0x... --value Alice --proof 0x... 0x...
"""

__version__ = "0.1.0"
