"""Entry point for running the tic-tac-toe server via ``python -m tictactoe``."""

from __future__ import annotations

import logging
import os

import uvicorn


def setup_logging() -> None:
    level = (os.environ.get("TICTACTOE_LOG_LEVEL", "INFO") or "INFO").upper()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )
    root.addHandler(handler)


def main() -> None:
    """Start the FastAPI-powered tic-tac-toe web server."""

    setup_logging()
    host = os.environ.get("TICTACTOE_HOST", "0.0.0.0")
    port = int(os.environ.get("TICTACTOE_PORT", "8000"))
    uvicorn.run("tictactoe.ui:app", host=host, port=port, reload=False, log_config=None)


if __name__ == "__main__":
    main()
