# quiz_app/utils/dependencies.py
from fastapi import Request
from quiz_app.services.session_engine import SessionEngine

def get_engine(request: Request) -> SessionEngine:
    """
    Dependency returning the engine created during application startup.
    Tests replace app.state.engine after startup to serve a fake-provider engine.
    """
    return request.app.state.engine
