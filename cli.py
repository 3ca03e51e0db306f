"""CLI commands for the event RSVP service."""

import asyncio

import typer
import uvicorn

from event_rsvp.config.settings import settings
from event_rsvp.errors import DeliveryError
from event_rsvp.invitations.classifier import ReplyClassification, matched_pattern
from event_rsvp.messaging import create_messaging_gateway

app = typer.Typer(help="CLI commands for the event RSVP service")


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, "--host", "-h", help="Interface to bind"),
    port: int = typer.Option(settings.app_port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server."""
    uvicorn.run("event_rsvp.main:app", host=host, port=port, reload=reload)


@app.command()
def classify(
    text: str = typer.Argument(..., help="Reply text to classify"),
):
    """Show how a reply would be classified."""
    verdict, pattern = matched_pattern(text)

    colors = {
        ReplyClassification.ACCEPTED: typer.colors.GREEN,
        ReplyClassification.DECLINED: typer.colors.RED,
        ReplyClassification.UNRECOGNIZED: typer.colors.YELLOW,
    }
    typer.secho(verdict.value, fg=colors[verdict])
    if pattern is not None:
        typer.secho(f"  Matched: {pattern!r}", fg=typer.colors.BLUE)


@app.command()
def send_test(
    phone: str = typer.Argument(..., help="Recipient phone number"),
    message: str = typer.Option(
        "Hello from the event RSVP service!",
        "--message",
        "-m",
        help="Text to send",
    ),
):
    """Send a single WhatsApp message through the configured gateway."""
    gateway = create_messaging_gateway()
    if not gateway.is_ready():
        typer.secho("WhatsApp gateway is not configured", fg=typer.colors.RED)
        raise typer.Exit(1)

    try:
        message_id = asyncio.run(gateway.send(phone, message))
    except DeliveryError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Message sent!", fg=typer.colors.GREEN)
    typer.secho(f"  To: {phone}", fg=typer.colors.BLUE)
    typer.secho(f"  Message ID: {message_id}", fg=typer.colors.CYAN)


@app.command()
def check_gateway():
    """Validate the WhatsApp Business API credentials."""
    gateway = create_messaging_gateway()
    try:
        asyncio.run(gateway.validate_connection())
    except Exception as e:
        typer.secho(f"Gateway check failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("WhatsApp Business API connection OK", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
