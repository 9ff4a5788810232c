# cli/commands/serve.py
import click
import uvicorn


@click.command()
@click.option('--host', default='127.0.0.1', help='Interface to bind')
@click.option('--port', default=3000, type=int, help='Port to listen on')
@click.option('--reload/--no-reload', default=False, help='Reload on code changes')
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API"""
    uvicorn.run("api.asgi:app", host=host, port=port, reload=reload)
