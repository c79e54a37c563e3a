"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

# Keep a developer's .env from leaking real tokens into tests
os.environ.setdefault("SLACK_BOT_TOKEN", "")
os.environ.setdefault("NOTION_TOKEN", "")

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
