"""Index resolution commands.

Request files use the same JSON shape as ``POST /api/v1/resolve``::

    {"kind": "single", "action": "indices:data/read/search", "indices": ["logs-*"]}
"""

from pathlib import Path
import sys

import click
from pydantic import ValidationError

from index_guard.cli.utils import error, header, index_list, info, success, warning
from index_guard.core.exceptions import AppException
from index_guard.core.resolution import ALL_INDICES, IndexResolutionEngine, InMemoryCatalog
from index_guard.core.settings import get_resolution_settings
from index_guard.features.resolution import ResolutionService, ResolveRequest, ResolveResponse

_catalog_option = click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file mapping index names to alias lists (default: RESOLUTION_CATALOG_PATH)",
)
_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
_policy_option = click.option(
    "--pattern-policy",
    type=click.Choice(["keep", "replace"]),
    default=None,
    help="Keep matched wildcard patterns next to their expansions, or replace them",
)


def _build_service(catalog_path: Path | None, pattern_policy: str | None) -> ResolutionService:
    settings = get_resolution_settings()
    if pattern_policy:
        settings = settings.model_copy(update={"pattern_policy": pattern_policy})

    path = catalog_path or settings.catalog_path
    if path is None:
        warning("No catalog given, wildcard expansion will find nothing")
        catalog = InMemoryCatalog()
    else:
        catalog = InMemoryCatalog.from_file(path)
        info(f"Loaded {len(catalog)} indices from {path}")
    return ResolutionService(IndexResolutionEngine.from_settings(settings, catalog))


def _print_response(response: ResolveResponse, output_format: str, audit: str | None = None) -> None:
    if output_format == "json":
        click.echo(response.model_dump_json(indent=2))
        return
    header(f"{response.action} ({response.kind.value})")
    index_list(response.indices, all_marker=ALL_INDICES)
    if response.all_indices:
        warning("Request targets every index")
    if audit:
        click.echo(f"\n{audit}")
    success(f"Resolved {len(response.indices)} name(s): {response.description}")


@click.command(name="resolve")
@click.option(
    "--request",
    "request_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file describing the request",
)
@_catalog_option
@_format_option
@_policy_option
def resolve(
    request_path: Path,
    catalog_path: Path | None,
    output_format: str,
    pattern_policy: str | None,
) -> None:
    """Resolve the indices a request described in a JSON file touches."""
    try:
        payload = ResolveRequest.model_validate_json(request_path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        error(f"Invalid request file: {exc.error_count()} error(s)")
        click.echo(str(exc), err=True)
        sys.exit(1)

    try:
        service = _build_service(catalog_path, pattern_policy)
        response = service.resolve(payload.to_action_request())
    except AppException as exc:
        error(exc.detail)
        sys.exit(1)

    _print_response(response, output_format)


@click.command(name="explain")
@click.argument("method", type=click.Choice(["GET", "POST", "PUT", "DELETE"], case_sensitive=False))
@click.argument("path")
@click.option(
    "--body",
    "body_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the request body",
)
@_catalog_option
@_format_option
@_policy_option
def explain(
    method: str,
    path: str,
    body_path: Path | None,
    catalog_path: Path | None,
    output_format: str,
    pattern_policy: str | None,
) -> None:
    """Resolve the indices a REST call (e.g. GET /logs-*/_search) touches."""
    body = body_path.read_bytes() if body_path else None
    if not path.startswith("/"):
        path = f"/{path}"

    try:
        service = _build_service(catalog_path, pattern_policy)
        context = service.build_context(method, path, body, remote_address="127.0.0.1")
        response = service.explain(context)
    except AppException as exc:
        error(exc.detail)
        sys.exit(1)

    _print_response(response, output_format, audit=response.audit)
