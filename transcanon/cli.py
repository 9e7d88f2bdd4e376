"""Command-line interface for transcanon.

Responsibilities:
- Expose user-facing commands for whitespace normalization, fingerprinting,
  and reconciliation of translated content.
- Convert CLI arguments into `EngineConfig` and engine calls.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from .cli_rendering import (
    echo_fingerprint,
    echo_json,
    echo_rendered_output,
    exit_with_command_error,
)
from .config import ConfigLoader, EngineConfig
from .content import assign_ids, compute_fingerprint, decode_source, encode_source
from .errors import ContentStageError
from .parsing import parse_key_value_pairs
from .reconcile import reconcile
from .remote import HttpTranslationFetcher, TranslationMemo
from .telemetry.logger import EventLogger
from .text import normalize_whitespace

app = typer.Typer(
    name="transcanon",
    no_args_is_help=True,
    help="Canonicalize, fingerprint, and reconcile translated UI content.",
)


def _load_config(config_path: Path | None) -> EngineConfig:
    """Load YAML config when requested, else environment config, mapping failures to stage errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise ContentStageError(
                stage="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix the `TRANSCANON_*` environment variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise ContentStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ContentStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _read_json(path: Path, stage: str) -> Any:
    """Read one JSON document, mapping failures to stage errors."""

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ContentStageError(
            stage=stage,
            detail=f"File not found: `{path}`.",
            hint="Pass an existing JSON file path.",
        ) from exc
    except json.JSONDecodeError as exc:
        raise ContentStageError(
            stage=stage,
            detail=f"File `{path}` is not valid JSON: {exc.msg} (line {exc.lineno}).",
            hint="Fix the JSON syntax and rerun.",
        ) from exc


def _decode_content(path: Path) -> Any:
    """Read authored content JSON and decode it into a source tree."""

    payload = _read_json(path, stage="decode")
    try:
        return decode_source(payload)
    except ValueError as exc:
        raise ContentStageError(
            stage="decode",
            detail=f"Content file `{path}` is malformed: {exc}",
            hint="Use the compact content vocabulary: t/i/c/d for elements, k/v for variables.",
        ) from exc


def _fetch_target(
    config: EngineConfig,
    fingerprint: str,
    locales: tuple[str, ...],
    context: str | None,
    logger: EventLogger,
) -> Any:
    """Fetch the first translation along the locale chain, skipping untranslated locales."""

    if not config.remote_enabled or not fingerprint:
        return None

    fetcher = HttpTranslationFetcher(
        cache_url=config.cache_url or "",
        project_id=config.project_id or "",
    )
    with TranslationMemo(
        fetcher,
        timeout_seconds=config.fetch_timeout_seconds,
        max_timeout_seconds=config.max_fetch_timeout_seconds,
        logger=logger,
    ) as memo:
        for locale in locales:
            if locale == config.default_locale:
                break
            if not config.is_translated(locale):
                continue
            logger.log_stage_start("fetch", fingerprint=fingerprint, locale=locale)
            payload = memo.get(fingerprint, locale, context=context)
            if payload is not None:
                logger.log_stage_complete("fetch", fingerprint=fingerprint, locale=locale)
                return payload
    return None


@app.command("normalize")
def normalize_command(
    text: Annotated[str, typer.Argument(help="Raw text run to normalize.")],
    collapse: Annotated[
        bool,
        typer.Option("--collapse", help="Collapse space/tab runs even without line breaks."),
    ] = False,
) -> None:
    """Normalize one text run the way authored content is canonicalized."""

    normalized = normalize_whitespace(text, collapse=collapse)
    if normalized is None:
        typer.echo("(omitted)")
        return
    typer.echo(normalized)


@app.command("fingerprint")
def fingerprint_command(
    content: Annotated[Path, typer.Argument(help="Path to authored content JSON.")],
    context: Annotated[
        str | None, typer.Option("--context", help="Disambiguation context for translators.")
    ] = None,
    content_id: Annotated[
        str | None, typer.Option("--id", help="Developer-assigned content identifier.")
    ] = None,
    data_format: Annotated[
        str | None,
        typer.Option("--data-format", help="Payload format (overrides config file value)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with engine defaults."),
    ] = None,
    show_payload: Annotated[
        bool,
        typer.Option("--payload", help="Also print the translation request payload."),
    ] = False,
) -> None:
    """Compute the content fingerprint for an authored tree."""

    try:
        config = _load_config(config_file)
        resolved_format = (data_format or config.data_format).upper()
        logger = EventLogger()
        logger.log_stage_start("fingerprint", data_format=resolved_format)
        source = assign_ids(_decode_content(content))
        fingerprint = compute_fingerprint(
            source, context=context, id=content_id, data_format=resolved_format
        )
        logger.log_stage_complete("fingerprint", fingerprint=fingerprint or "static")
    except Exception as exc:
        exit_with_command_error("fingerprint", exc)

    echo_fingerprint(fingerprint, resolved_format, source.node_count)
    if show_payload:
        echo_json(encode_source(source))


@app.command("reconcile")
def reconcile_command(
    source_path: Annotated[Path, typer.Argument(help="Path to authored content JSON.")],
    target_path: Annotated[
        Path | None,
        typer.Argument(
            help="Path to translated payload JSON. Fetched from the cache service when omitted.",
        ),
    ] = None,
    locale: Annotated[
        list[str] | None,
        typer.Option("--locale", help="Requested locale; repeat for a preference list."),
    ] = None,
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="Render-time variable binding as `key=value`; repeatable."),
    ] = None,
    context: Annotated[
        str | None, typer.Option("--context", help="Disambiguation context for translators.")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with engine defaults."),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the output tree as JSON.")
    ] = False,
) -> None:
    """Merge a translated payload onto authored content and print the result."""

    try:
        config = _load_config(config_file)
        try:
            variables = parse_key_value_pairs(var or [])
        except ValueError as exc:
            raise ContentStageError(
                stage="config",
                detail=str(exc),
                hint="Pass render variables as `--var name=value`.",
            ) from exc
        locales = config.locale_chain(locale or None)
        logger = EventLogger()
        source = assign_ids(_decode_content(source_path))
        if target_path is not None:
            target = _read_json(target_path, stage="reconcile")
        else:
            fingerprint = compute_fingerprint(
                source, context=context, data_format=config.data_format
            )
            target = _fetch_target(config, fingerprint, locales, context, logger)
        logger.log_stage_start("reconcile", locale=locales[0] if locales else "none")
        output = reconcile(
            source,
            target,
            locales,
            data_format=config.data_format,
            variables=variables,
            logger=logger,
        )
        logger.log_stage_complete("reconcile", nodes=source.node_count)
    except Exception as exc:
        exit_with_command_error("reconcile", exc)

    echo_rendered_output(output, as_json)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
