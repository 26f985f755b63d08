"""Typer application and console-script entry point for oairouter.

Commands:

* ``oairouter inspect SOURCE`` -- list the routes a router would mount for
  the given API document(s), without starting a server.
* ``oairouter serve SOURCE`` -- boot an :class:`~oairouter.router.OAIRouter`
  with entry-point plugins and serve it with uvicorn.

:class:`~oairouter.exceptions.OAIRouterError` failures exit with the
error's ``exit_code``.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Optional

import typer
from rich.logging import RichHandler

from oairouter import __version__
from oairouter.exit_codes import EXIT_GENERIC_FAILURE
from oairouter.output import OutputFormat, OutputManager, get_output, set_output

app = typer.Typer(
    name="oairouter",
    help="Mount OpenAPI documents as ASGI routes.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"oairouter {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the output manager and logging before every sub-command."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    _configure_logging(output, verbose)


def _configure_logging(output: OutputManager, verbose: bool) -> None:
    root = logging.getLogger("oairouter")
    root.handlers.clear()
    root.addHandler(
        RichHandler(console=output.stderr_console, show_path=False, rich_tracebacks=True)
    )
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False


def _load(source: str) -> Any:
    from oairouter.exceptions import OAIRouterError
    from oairouter.loader import load_api_doc

    try:
        return asyncio.run(load_api_doc(source, logging.getLogger("oairouter")))
    except OAIRouterError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def route_rows(api: list[dict[str, Any]], prefix: str = "") -> list[list[str]]:
    """Rows of ``[METHOD, path, operationId, document title]`` for *api*."""
    from oairouter.models import HTTP_METHODS
    from oairouter.paths import oai_to_route_path, url_join

    rows: list[list[str]] = []
    for doc in api:
        for path, path_item in doc.get("paths", {}).items():
            if not isinstance(path_item, dict):
                continue
            endpoint = url_join(prefix, oai_to_route_path(doc.get("basePath", ""), path))
            for operation, operation_value in path_item.items():
                if operation.lower() not in HTTP_METHODS or not isinstance(operation_value, dict):
                    continue
                rows.append([
                    operation.upper(),
                    endpoint,
                    str(operation_value.get("operationId") or "-"),
                    doc["info"]["title"],
                ])
    return sorted(rows, key=lambda row: (row[1], row[0]))


@app.command("inspect")
def inspect_command(
    source: str = typer.Argument(..., help="API document file, directory or URL."),
    prefix: str = typer.Option("", "--prefix", envvar="OAIROUTER_PREFIX", help="Route prefix."),
    merge: bool = typer.Option(
        False, "--merge", help="Include paths of every document, not just the first."
    ),
) -> None:
    """List the routes that would be mounted for SOURCE.

    Example::

        oairouter inspect ./api/petstore.yaml --prefix /api
    """
    from oairouter.exceptions import OAIRouterError

    loaded = _load(source)
    api = loaded if isinstance(loaded, list) else [loaded]
    documents = api if merge else api[:1]

    try:
        rows = route_rows(documents, prefix)
    except OAIRouterError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    get_output().print_table(
        ["Method", "Endpoint", "Operation", "Document"],
        rows,
        title=f"Routes ({len(rows)})",
    )
    if len(api) > 1 and not merge:
        get_output().warning(
            f"{len(api) - 1} more document(s) loaded; only the first is mounted (use --merge)"
        )


@app.command("serve")
def serve_command(
    source: str = typer.Argument(..., help="API document file, directory or URL."),
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", help="Bind port."),
    prefix: str = typer.Option("", "--prefix", envvar="OAIROUTER_PREFIX", help="Route prefix."),
    explorer: bool = typer.Option(
        True, "--explorer/--no-explorer", envvar="OAIROUTER_EXPLORER", help="Publish the API explorer."
    ),
    plugins: Optional[list[str]] = typer.Option(
        None, "--plugin", help="Entry-point plugin to enable (repeatable; default: all)."
    ),
    handlers: Optional[str] = typer.Option(
        None, "--handlers", help="Package searched for bare x-oai-handler names."
    ),
    merge: bool = typer.Option(False, "--merge", help="Mount the paths of every document."),
) -> None:
    """Serve SOURCE as a live API with uvicorn.

    Example::

        oairouter serve ./api/petstore.yaml --handlers petstore.handlers
    """
    import uvicorn

    from oairouter.plugins import HandlerPlugin
    from oairouter.router import OAIRouter

    output = get_output()
    router = OAIRouter(
        api_doc=source,
        api_explorer_visible=explorer,
        options={"prefix": prefix},
        path_policy="merge" if merge else "first",
    )
    loaded = router.plugin_registry.discover(
        enabled=plugins or (), disabled=("handler",) if handlers else ()
    )
    if handlers:
        asyncio.run(router.mount(HandlerPlugin, {"package": handlers}))
        loaded.append("handler")
    output.debug(f"Plugins: {', '.join(loaded) or 'none'}")
    output.info(f"Serving {source} on http://{host}:{port}")

    router.on("ready", lambda: output.success(f"Routes ready on http://{host}:{port}{prefix or '/'}"))
    router.on("error", lambda exc: output.error(f"Boot failed: {exc}"))

    uvicorn.run(router.routes(), host=host, port=port, log_level="info")


def main() -> None:
    """Console-script entry point."""
    from oairouter.exceptions import OAIRouterError

    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except OAIRouterError as exc:
        get_output().error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        get_output().error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
