"""Command-line interface for Current Affairs Digest."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from affairs_digest import __version__
from affairs_digest.config import get_config, load_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("affairs_digest")

DEFAULT_CONFIG = """# Current Affairs Digest configuration
# Values set here take precedence over the environment; commented or blank
# entries fall through to it. Secrets are best
# left commented out and supplied as AFFAIRS_DIGEST_API_KEYS__GEMINI,
# AFFAIRS_DIGEST_SMTP__PASSWORD, AFFAIRS_DIGEST_SERVER__TRIGGER_KEY, etc.

api_keys:
  # gemini: "your-gemini-api-key"

email:
  # sender: "digest@example.com"
  # recipients: "student1@example.com,student2@example.com"

smtp:
  # host: "smtp.gmail.com"
  # port: 587
  # password: "app-password-for-the-sender"

server:
  # port: 3000
  # trigger_key: "shared-secret-for-send-now"

scheduler:
  # cron: "0 6 * * *"
  # timezone: "Asia/Kolkata"  # unset uses the host timezone
"""


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool):
    """Current Affairs Digest - daily exam-focused news by email."""
    ctx.ensure_object(dict)

    # Set logging level
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Load configuration
    if config:
        load_config(config)
    else:
        load_config()


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def init(force: bool):
    """Create a starter config.yaml."""
    config_path = Path("config.yaml")

    if config_path.exists() and not force:
        click.echo(f"{config_path} already exists (use --force to overwrite)")
        return

    example_path = Path("config.example.yaml")
    if example_path.exists():
        import shutil

        shutil.copy(example_path, config_path)
        click.echo(f"Created {config_path} from example")
    else:
        config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
        click.echo(f"Created {config_path}")


@cli.command()
@click.option("--host", default=None, help="Interface to bind")
@click.option("--port", "-p", type=int, envvar="PORT", default=None, help="Port to listen on")
@click.option("--no-schedule", is_flag=True, help="Serve HTTP only, without the daily timer")
def serve(host: Optional[str], port: Optional[int], no_schedule: bool):
    """Run the HTTP trigger surface and the daily timer."""
    import uvicorn

    from affairs_digest.api import create_app

    config = get_config()
    host = host or config.server.host
    port = port or config.server.port

    app = create_app(config, schedule=False if no_schedule else None)

    click.echo(f"Server running on port {port}")
    uvicorn.run(app, host=host, port=port)


@cli.command()
def send():
    """Fetch, render and send today's digest once."""
    from affairs_digest.dispatcher import DigestDispatcher

    config = get_config()
    recipients = config.email.recipient_list

    click.echo(f"Sending digest to {len(recipients)} recipient(s)...")

    if DigestDispatcher(config).run():
        click.echo("Email sent successfully!")
    else:
        click.echo("Failed to send email", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Render this text file instead of fetching",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default="digest-preview.html",
    show_default=True,
    help="Where to write the rendered HTML",
)
def preview(input_path: Optional[str], output_path: str):
    """Render a digest to an HTML file without sending it."""
    from affairs_digest.digest import render_html_email

    if input_path:
        content = Path(input_path).read_text(encoding="utf-8")
    else:
        from affairs_digest.content import ContentFetcher

        try:
            content = ContentFetcher(get_config()).fetch()
        except ValueError as e:
            raise click.UsageError(str(e))

        if not content:
            click.echo("No current affairs content was generated", err=True)
            sys.exit(1)

    Path(output_path).write_text(render_html_email(content), encoding="utf-8")
    click.echo(f"Preview written to {output_path}")


# Scheduler command
@cli.group()
def scheduler():
    """Scheduler daemon commands."""
    pass


@scheduler.command("start")
def scheduler_start():
    """Run the daily timer in the foreground, without the HTTP server."""
    from affairs_digest.scheduler import start_scheduler

    click.echo("Starting scheduler...")
    start_scheduler(get_config(), foreground=True)


@scheduler.command("run-once")
def scheduler_run_once():
    """Run the scheduled digest job once."""
    from affairs_digest.dispatcher import DigestDispatcher
    from affairs_digest.scheduler import digest_job

    click.echo("Running digest job...")
    digest_job(DigestDispatcher(get_config()))
    click.echo("Job completed")


if __name__ == "__main__":
    cli()
