# api/asgi.py
# Entry point for `uvicorn api.asgi:app`
from api.main import create_app

app = create_app()
