"""
Merkle CLI

Command-line front end for building trees and checking proofs.

Usage:
    python -m merkle_cli build A B C
    python -m merkle_cli prove A B C --index 0 --out proof.json
    python -m merkle_cli verify proof.json
    python -m merkle_cli show --file blocks.txt
    python -m merkle_cli demo
"""

__version__ = "0.1.0"
