"""CLI entry point for family-tree-layout."""

import json
import logging
import os
import sys
from typing import NoReturn

import click

from family_layout import load_snapshot
from family_layout.config import LayoutConfig
from family_layout.layout.engine import auto_layout, layout
from family_layout.renderers.text import render_preview
from family_layout.validation import check_snapshot

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


def _read_text(path: str | None) -> str:
    if not path:
        return sys.stdin.read()
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        _fail(f"error: cannot read '{path}': {e}")


def _load_config(value: str | None) -> LayoutConfig:
    """Config from inline JSON or a path to a JSON file."""
    if value is None:
        return LayoutConfig()
    text = _read_text(value) if os.path.isfile(value) else value
    try:
        options = json.loads(text)
    except json.JSONDecodeError as e:
        _fail(f"config error: not valid JSON: {e}")
    if not isinstance(options, dict):
        _fail("config error: expected a JSON object of layout options")
    try:
        return LayoutConfig.from_options(options)
    except ValueError as e:
        _fail(f"config error: {e}")


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--config", "-c", "config", type=str, default=None, help="Layout options as JSON, or a path to a JSON file")
@click.option("--fallback", "-f", is_flag=True, help="Fall back to plain generation rows if the layout fails")
@click.option("--preview", "-p", is_flag=True, help="Print a text diagram instead of JSON")
@click.option("--ascii", "-a", "use_ascii", is_flag=True, help="Use plain ASCII in the preview instead of Unicode")
@click.option("--check", is_flag=True, help="Only validate the snapshot; exit 1 if problems are found")
@click.option("--verbose", "-v", count=True, help="Log progress (-v info, -vv debug)")
def main(
    input: str | None,
    output: str | None,
    config: str | None,
    fallback: bool,
    preview: bool,
    use_ascii: bool,
    check: bool,
    verbose: int,
) -> None:
    """Family tree layout: position a {nodes, edges} JSON snapshot."""
    logging.basicConfig(level=_LOG_LEVELS[min(verbose, 2)], format="%(levelname)s %(name)s: %(message)s")

    text = _read_text(input)
    try:
        data = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        _fail(f"parse error: not valid JSON: {e}")
    try:
        nodes, edges = load_snapshot(data)
    except ValueError as e:
        _fail(f"parse error:\n{e}")

    if check:
        problems = check_snapshot(nodes, edges)
        for problem in problems:
            click.echo(problem)
        if problems:
            sys.exit(1)
        click.echo("ok")
        return

    cfg = _load_config(config)
    run = auto_layout if fallback else layout
    try:
        result = run(nodes, edges, cfg)
    except ValueError as e:
        _fail(f"layout error: {e}")

    if preview:
        rendered = render_preview(result, unicode=not use_ascii, config=cfg)
    else:
        rendered = json.dumps(result.to_dict(), ensure_ascii=False, indent=2) + "\n"

    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(rendered)
        except OSError as e:
            _fail(f"error: cannot write '{output}': {e}")
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
