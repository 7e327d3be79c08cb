import sys
from pathlib import Path

# Make the 'crawler' package importable from src/ without installing it
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
