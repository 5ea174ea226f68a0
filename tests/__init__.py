"""Test suite for transitory.

Test Structure:
- unit/transitions/: state model, styles, config, engine, scheduler and driver
- unit/config/: config file loading
- unit/utils/: logging and JSON helpers
- unit/cli/: simulate command
- conftest.py: shared fixtures (styles, default config, manual clock)
"""
