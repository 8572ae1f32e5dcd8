"""Serve mode: run the FastAPI slip server."""

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from src.config import SERVER_PORT
from src.order_service import MockOrderService
from src.server import create_app

from .shared import console, logger


def serve(
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Port for the slip server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    mock: Optional[Path] = typer.Option(None, "--mock", "-m", help="Serve orders from a JSON file instead of the API"),
) -> None:
    """Start the HTTP server for slip generation and previews."""
    log = logger.bind(command="serve", port=port, mock=str(mock) if mock else None)
    log.info("serve.start")
    service = MockOrderService(path=mock) if mock is not None else None
    if service is not None:
        console.print(f"[dim]Using mock orders from {mock}[/dim]")
    app = create_app(service=service)
    uvicorn.run(app, host=host, port=port, log_level="info")
