#!/usr/bin/env python3
"""Run Streamlit app, or the API with `python run.py api`."""

import subprocess
import sys
from pathlib import Path

if len(sys.argv) > 1 and sys.argv[1] == "api":
    import uvicorn

    from settings.logging import setup_logging

    setup_logging(to_file=True, name="api")
    uvicorn.run("web.api.app:create_app", factory=True, host="0.0.0.0", port=8000)
else:
    app = Path(__file__).parent / "web" / "streamlit" / "app.py"
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app)])
