"""Start command implementation"""
from ..utils import use_instance_path


def start_command(
    path: str = None,
    host: str = None,
    port: int = None,
    reload: bool = False,
):
    """Start DevMeet backend server

    Args:
        path: Instance directory path
        host: Bind address (default: server_host setting)
        port: Bind port (default: server_port setting)
        reload: Reload on code changes
    """
    use_instance_path(path)

    import uvicorn
    from ...backend.config import settings

    host = host or settings.server_host
    port = port or settings.server_port

    print(f"Starting DevMeet ({settings.environment.value})")
    print(f"Server: http://{host}:{port}")
    print(f"Docs: http://{host}:{port}/docs")
    print("")

    uvicorn.run(
        "devmeet.backend.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.logging_level.lower(),
    )
