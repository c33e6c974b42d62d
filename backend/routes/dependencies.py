from fastapi import Request

from utils.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine_client(request: Request):
    """The shared ReasoningEngineClient, or None when no key is configured."""
    return request.app.state.engine_client
