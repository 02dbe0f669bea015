"""
Description:
Module for adding CORS middleware to FastAPI application.

Arguments:
- app: FastAPI application instance to which CORS middleware will be added.
- origins: Browser origins allowed to call the API (the front end's URL).

Returns:
- None, but modifies the app to allow cross-origin requests from the given origins.

Dependencies:
- fastapi: For creating the FastAPI application and adding middleware.
- fastapi.middleware.cors: For CORS middleware functionality.
- loguru: For logging information about the middleware setup.
"""
from typing import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger


def add_cors_middleware(app: FastAPI, origins: Sequence[str]):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS middleware added for {len(origins)} origin(s)")
