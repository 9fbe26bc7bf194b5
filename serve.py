"""Run the planner API locally.

Run with:  python3 serve.py
"""

from __future__ import annotations

import os

API_PORT = int(os.getenv("PORT", "8000"))


def main() -> None:
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=API_PORT, log_level="info")


if __name__ == "__main__":
    main()
