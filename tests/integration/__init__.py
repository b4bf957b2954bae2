"""Integration tests for xtabml.

Integration tests parse real export files from tests/fixtures:
- File system operations (open, truncated and missing files)
- Concurrent parsing of the same file

Run with: poetry run pytest tests/integration/ -v
Skip: pytest -m "not integration"
"""
