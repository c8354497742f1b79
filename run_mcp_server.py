"""
Form Engine MCP Server Entry Point.

Run the MCP server with either stdio or SSE transport.

Usage:
    # stdio mode (desktop clients)
    python run_mcp_server.py --transport stdio

    # SSE mode (for Docker/remote)
    python run_mcp_server.py --transport sse --port 8080

    # Use environment variables
    MCP_TRANSPORT=sse MCP_PORT=8080 python run_mcp_server.py
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent / "src"))

from form_engine.config import get_config, update_config
from form_engine.mcp_server import run_mcp_server


def main():
    """Main entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Form Engine MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Desktop client (stdio)
  python run_mcp_server.py --transport stdio

  # Docker/Remote (SSE)
  python run_mcp_server.py --transport sse --port 8080

Environment Variables:
  MCP_TRANSPORT                   Transport type: stdio or sse (default: stdio)
  MCP_HOST                        Host for SSE transport (default: 0.0.0.0)
  MCP_PORT                        Port for SSE transport (default: 8080)
  FORM_ENGINE_STORAGE_PATH        JSON file holding saved forms
  FORM_ENGINE_MAX_REFRESH_PASSES  Pass limit for derived fields (0 = field count + 1)
  FORM_ENGINE_LOG_LEVEL           Logging level (default: INFO)
        """,
    )

    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=config.mcp_transport,
        help=f"Transport type (default: {config.mcp_transport})",
    )

    parser.add_argument(
        "--host",
        default=config.mcp_host,
        help=f"Host for SSE transport (default: {config.mcp_host})",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=config.mcp_port,
        help=f"Port for SSE transport (default: {config.mcp_port})",
    )

    parser.add_argument(
        "--storage-path",
        default=config.storage_path,
        help=f"JSON file holding saved forms (default: {config.storage_path})",
    )

    args = parser.parse_args()
    update_config(storage_path=args.storage_path)

    # stdout carries the protocol in stdio mode
    banner = sys.stderr
    print("=" * 60, file=banner)
    print("Form Engine MCP Server", file=banner)
    print("=" * 60, file=banner)
    print(f"Transport: {args.transport}", file=banner)
    if args.transport == "sse":
        print(f"Host: {args.host}", file=banner)
        print(f"Port: {args.port}", file=banner)
    print(f"Storage: {args.storage_path}", file=banner)
    print("=" * 60, file=banner)

    try:
        asyncio.run(
            run_mcp_server(
                transport=args.transport,
                host=args.host,
                port=args.port,
            )
        )
    except KeyboardInterrupt:
        print("\nServer stopped.", file=banner)
    except Exception as e:
        print(f"Error: {e}", file=banner)
        sys.exit(1)


if __name__ == "__main__":
    main()
