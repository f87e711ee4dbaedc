"""DevMeet CLI entry point"""
import sys
import argparse
from .commands.init_db import init_db_command
from .commands.start import start_command
from .commands.create_admin import create_admin_command


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="devmeet",
        description="DevMeet - connect developers who can teach each other",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    # Init-db command
    init_parser = subparsers.add_parser(
        "init-db",
        help="Create database tables",
    )
    init_parser.add_argument(
        "path",
        nargs="?",
        help="Instance directory path (default: ~/.devmeet)",
    )

    # Start command
    start_parser = subparsers.add_parser(
        "start",
        help="Start DevMeet backend server",
    )
    start_parser.add_argument(
        "path",
        nargs="?",
        help="Instance directory path (default: ~/.devmeet)",
    )
    start_parser.add_argument("--host", help="Bind address")
    start_parser.add_argument("--port", type=int, help="Bind port")
    start_parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes",
    )

    # Create-admin command
    admin_parser = subparsers.add_parser(
        "create-admin",
        help="Promote an account to administrator",
    )
    admin_parser.add_argument("email", help="Account email")
    admin_parser.add_argument(
        "path",
        nargs="?",
        help="Instance directory path (default: ~/.devmeet)",
    )

    # Parse arguments
    args = parser.parse_args(argv)

    # Execute command
    if args.command == "init-db":
        init_db_command(args.path)
    elif args.command == "start":
        start_command(args.path, args.host, args.port, args.reload)
    elif args.command == "create-admin":
        create_admin_command(args.email, args.path)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
