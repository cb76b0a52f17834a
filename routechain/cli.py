"""
routechain command line interface.

    routechain routes app.py            # print the route table of `app` in app.py
    routechain dev --app-file main.py   # uvicorn on 127.0.0.1 with auto-reload
    routechain run --app-file main.py   # uvicorn on 0.0.0.0
"""

import argparse
import importlib.util
import os
import sys
from typing import List, Optional, Tuple

import uvicorn

from .app import RouteChain
from .config import Settings
from .logger import configure_logging
from .routing import Router


def split_app_target(target: str) -> Tuple[str, str]:
    """
    Split 'file.py:attr' into its file path and attribute name.

    The attribute defaults to 'app'.
    """
    # "C:\app.py" style drive letters keep their colon
    path, sep, attr = target.rpartition(":")
    if not sep or not path or os.sep in attr or "/" in attr:
        return target, "app"
    return path, attr or "app"


def find_app_string(target: str) -> str:
    """
    Formats the target to Uvicorn convention: 'module:app_object'.

    Args:
        target: 'file.py' or 'file.py:attr'
    """
    file_path, attr = split_app_target(target)
    module_name = os.path.basename(file_path).replace(".py", "")
    return f"{module_name}:{attr}"


def load_router(target: str) -> Router:
    """
    Import the file named by ``target`` and return its Router.

    The attribute may be a RouteChain application or a bare Router.

    Raises:
        FileNotFoundError: If the file does not exist
        AttributeError: If the module has no such attribute
        TypeError: If the attribute is neither a RouteChain nor a Router
    """
    file_path, attr = split_app_target(target)
    file_path = os.path.abspath(file_path)
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"No such file: {file_path}")

    app_dir = os.path.dirname(file_path)
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    module_name = os.path.basename(file_path).replace(".py", "")
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    obj = getattr(module, attr)
    if isinstance(obj, RouteChain):
        return obj.router
    if isinstance(obj, Router):
        return obj
    raise TypeError(f"'{attr}' in {file_path} is a {type(obj).__name__}, not a RouteChain or Router")


def format_routes(router: Router) -> List[str]:
    """One line per route in matching order: METHOD PATH (n) handler, handler, ..."""
    lines = []
    for route in router.routes:
        names = ", ".join(
            getattr(handler, "__qualname__", None) or type(handler).__name__
            for handler in route.handlers
        )
        lines.append(f"{route.method:<8}{route.path:<40}({len(route.handlers)}) {names}")
    return lines


def _add_server_arguments(subparser: argparse.ArgumentParser, settings: Settings) -> None:
    subparser.add_argument(
        '--app-file',
        type=str,
        default='app.py',
        help='Path to the file containing the application, optionally file.py:attr.'
    )
    subparser.add_argument(
        '--port',
        type=int,
        default=settings.port,
        help='The port to listen on.'
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routechain",
        description="routechain command line interface for inspecting and serving applications.",
        epilog="Example: routechain dev --app-file main.py"
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    routes_parser = subparsers.add_parser(
        'routes',
        help='Print the route table in matching order.',
    )
    routes_parser.add_argument('target', help='file.py or file.py:attr (default attr: app)')

    dev_parser = subparsers.add_parser(
        'dev',
        help='Run the application in development mode with auto-reload (Uvicorn).',
        description='Binds to 127.0.0.1 (localhost) and enables auto-reload.'
    )
    _add_server_arguments(dev_parser, settings)
    dev_parser.add_argument(
        '--no-reload',
        action='store_true',
        help='Disable auto-reload on code changes.'
    )

    run_parser = subparsers.add_parser(
        'run',
        help='Run the application in production mode.',
        description='Binds to 0.0.0.0 (public) and disables auto-reload.'
    )
    _add_server_arguments(run_parser, settings)
    run_parser.add_argument(
        '--host',
        type=str,
        default='0.0.0.0',
        help='The interface to bind.'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the routechain CLI."""
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.command == 'routes':
        router = load_router(args.target)
        for line in format_routes(router):
            print(line)
        return 0

    configure_logging(settings)

    file_path, _ = split_app_target(args.app_file)
    app_dir = os.path.dirname(os.path.abspath(file_path))

    # The uvicorn reloader subprocess inherits this import path
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    app_string = find_app_string(args.app_file)

    if args.command == 'dev':
        host = settings.host
        reload = not args.no_reload
        reload_dirs: Optional[List[str]] = [app_dir] if reload else None
        log_level = "debug" if settings.debug else "info"
    else:
        host = args.host
        reload = False
        reload_dirs = None
        log_level = settings.log_level.lower()

    print(f"routechain: running in {args.command.upper()} mode")
    print(f"Host: http://{host}:{args.port}")
    print(f"App: {app_string}")

    uvicorn.run(
        app_string,
        host=host,
        port=args.port,
        reload=reload,
        reload_dirs=reload_dirs,
        log_level=log_level,
        log_config=None,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
