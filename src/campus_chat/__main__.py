"""Entrypoint: python -m campus_chat"""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "campus_chat.app:create_app",
        factory=True,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
