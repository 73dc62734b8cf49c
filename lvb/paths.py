"""
Path configuration for the bilingual Bible search project.
"""

from pathlib import Path

# Project root is one level up from lvb/
PROJECT_ROOT = Path(__file__).parent.parent
BIBLE_DIR = PROJECT_ROOT / "public" / "bible"
BOOK_LIST_PATH = PROJECT_ROOT / "bible book list.txt"

DOCUMENT_SUFFIX = ".json"

