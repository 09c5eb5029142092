"""Main entry point for the Klar Export Service."""

import os

import uvicorn

from klar_export.server import app

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
