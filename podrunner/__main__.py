import click
import uvicorn
from dotenv import load_dotenv

from podrunner.config.provider import EnvConfigProvider
from podrunner.logging_config import get_logging_config

load_dotenv()


@click.command()
@click.option("--host", "host", default=None, help="Bind address (defaults to API_HOST)")
@click.option("--port", "port", default=None, type=int, help="Bind port (defaults to API_PORT)")
@click.option("--reload", "reload", is_flag=True, default=False, help="Reload on code changes")
def main(host: str, port: int, reload: bool):
    """Run the PodRunner API server."""
    api_config = EnvConfigProvider().get_api_config()

    uvicorn.run(
        "podrunner.main:app",
        host=host or api_config.host,
        port=port or api_config.port,
        log_level=api_config.log_level.lower(),
        reload=reload or api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )


if __name__ == "__main__":
    main()
