from __future__ import annotations

import os
import tempfile
from pathlib import Path

os.environ.pop("GEMINI_API_KEY", None)
os.environ.setdefault(
    "VIDEOPROMPT_TEMP_DIR", str(Path(tempfile.gettempdir()) / "videoprompt-tests")
)
