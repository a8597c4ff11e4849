"""
Rails SDK Command-Line Interface
===============================

- **rails**: assemble a Rails program and run it in the emulator, or print
  its disassembly listing

The tool is a Click application; exit codes are defined in
rails_sdk.cli.errors.
"""

__all__ = ["rails"]
