#!/usr/bin/env python
"""Swarm runner script.

Starts the agent swarm together with its admin API.

Usage:
    python scripts/run_server.py [--host HOST] [--port PORT] [--config PATH]

Examples:
    python scripts/run_server.py                       # Defaults from configs/app.yaml
    python scripts/run_server.py --port 8080           # Custom port
    python scripts/run_server.py --log-level debug     # Verbose logging
"""

import argparse
import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main() -> None:
    """Run the swarm with the specified configuration."""
    parser = argparse.ArgumentParser(
        description="Run the Agent Swarm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_server.py                       # Defaults
    python scripts/run_server.py --host 127.0.0.1      # Localhost only
    python scripts/run_server.py --reload              # Reload on code change
        """,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (default: from config or 0.0.0.0)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: from config or 8000)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload",
    )

    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (default: from config)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to .env file",
    )

    args = parser.parse_args()

    # Import uvicorn here to allow --help without uvicorn installed
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed. Run: pip install uvicorn[standard]")
        sys.exit(1)

    from swarm.utils.config import init_config

    config_path = args.config
    if config_path is None:
        default_config = project_root / "configs" / "app.yaml"
        if default_config.exists():
            config_path = str(default_config)

    # The app factory re-reads configuration in the server process
    if config_path:
        os.environ["SWARM_CONFIG"] = str(config_path)
    if args.env_file:
        os.environ["SWARM_ENV_FILE"] = args.env_file
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level.upper()
    if args.host:
        os.environ["APP_HOST"] = args.host
    if args.port:
        os.environ["APP_PORT"] = str(args.port)

    config = init_config(yaml_path=config_path, env_file=args.env_file)

    host = config.app.host
    port = config.app.port
    log_level = config.logging.level.lower()

    print(f"\n{'='*60}")
    print("  Agent Swarm")
    print(f"{'='*60}")
    print(f"  Host:      {host}")
    print(f"  Port:      {port}")
    print(f"  Endpoint:  {config.service.endpoint or '(not configured)'}")
    print(f"  Reload:    {'enabled' if args.reload else 'disabled'}")
    print(f"  Log Level: {log_level}")
    print(f"{'='*60}\n")

    # One process only: every worker would run its own swarm
    uvicorn.run(
        "swarm.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        reload_dirs=[str(project_root / "swarm")] if args.reload else None,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
