"""
clean-plus-guard — Module boundary guard for Clean Plus codebases.

Detects architectural violations in PHP and JS/TS trees:
- Shared contracts importing modules
- Module contracts importing other modules
- Cross-module imports that bypass the target module's contracts
- Route definitions in framework-level routes files
- Route auto-discovery in the composition root

Usage:
    clean-plus-guard [--rules clean-plus.rules.yaml] [--profile <key>] [--verbose]
    python -m clean_plus_guard --json
"""

__version__ = "1.0.0"
