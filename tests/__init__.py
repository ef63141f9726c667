"""
Tests for Crystal Mountain

This package contains tests for:
- Geometry stream, edge set and branch arena
- Shell, vein, tube and assembly operations
- Policies and the command line
- End-to-end generation and adapters
"""
