"""ASGI entrypoint: uvicorn api_main:app --reload"""

from spotify_top.api import create_app

app = create_app()
