"""PlexCord Main Application."""

import asyncio
import sys

import uvicorn
from pydantic import ValidationError

from plexcord import PLEXCORD_HEADER, log
from plexcord.config.settings import get_config
from plexcord.web.app import create_app


def validate_configuration() -> bool:
    """Validate the application configuration and log a summary of it.

    Returns:
        bool: True if configuration is valid, False otherwise
    """
    try:
        config = get_config()
    except ValidationError as e:
        log.error(f"PlexCord: Configuration validation failed: {e}")
        return False
    except (OSError, PermissionError) as e:
        log.error(f"PlexCord: File system error during configuration: {e}")
        return False

    log.info(f"PlexCord: {config}")
    if not config.discord_enabled:
        log.warning(
            "PlexCord: DISCORD_ID and DISCORD_TOKEN are not both set, "
            "notifications are disabled"
        )
    return True


async def run() -> int:
    """Main application entry point.

    Serves the webhook and image endpoints until interrupted.

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    log.info("\n" + PLEXCORD_HEADER)

    if not validate_configuration():
        return 1

    config = get_config()
    uv_config = uvicorn.Config(
        create_app(),
        host=config.host,
        port=config.port,
        log_config=None,
        loop="asyncio",
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
    server = uvicorn.Server(uv_config)

    log.success(
        f"PlexCord: Listening at \033[92mhttp://{config.host}:{config.port} "
        "(ctrl+c to stop)\033[0m"
    )
    try:
        await server.serve()
    except (OSError, PermissionError) as e:
        log.error(f"PlexCord: Could not start server: {e}")
        return 1
    except asyncio.CancelledError:
        log.info("PlexCord: Application cancelled")
    except Exception as e:
        log.error(f"PlexCord: Unexpected application error: {e}", exc_info=True)
        return 1

    log.success("PlexCord: Application shutdown complete")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv (list[str] | None): Command-line arguments (unused).

    Returns:
        int: Exit code (0 for success, 1 for error)
    """
    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        log.info("PlexCord: Application interrupted")
        return 0
    except Exception as e:
        log.error(f"PlexCord: Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
