from plexcord.utils.logging import Logger, get_logger
from plexcord.utils.terminal import supports_utf8
from plexcord.utils.version import get_docker_status, get_pyproject_version

__author__ = "PlexCord Contributors"
__license__ = "MIT"
__version__ = get_pyproject_version()


if supports_utf8():
    PLEXCORD_HEADER = f"""
╔═══════════════════════════════════════════════════════════════════════════════╗
║                                P L E X C O R D                                ║
╠═══════════════════════════════════════════════════════════════════════════════╣
║                                                                               ║
║  Version: {__version__:<68}║
║  Docker: {"Yes" if get_docker_status() else "No":<69}║
║  License: {__license__:<68}║
║                                                                               ║
╚═══════════════════════════════════════════════════════════════════════════════╝
    """.strip()
else:
    PLEXCORD_HEADER = f"""
+-------------------------------------------------------------------------------+
|                                P L E X C O R D                                |
+-------------------------------------------------------------------------------+
|                                                                               |
|  Version: {__version__:<68}|
|  Docker: {"Yes" if get_docker_status() else "No":<69}|
|  License: {__license__:<68}|
|                                                                               |
+-------------------------------------------------------------------------------+
    """.strip()

log: Logger = get_logger()
