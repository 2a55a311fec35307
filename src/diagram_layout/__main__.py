"""CLI entry point for diagram-layout."""

import json
import logging
import sys

import click

from diagram_layout import layout_text, parse_with_diagnostics
from diagram_layout.errors import DiagramError
from diagram_layout.serialize import diagnostic_to_dict, document_to_dict, layout_to_dict
from diagram_layout.types import LayoutMode


def _write(text: str, output: str | None) -> None:
    if output:
        try:
            with open(output, "w") as f:
                f.write(text)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(text)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option(
    "--mode",
    "-m",
    "mode",
    type=click.Choice([m.value for m in LayoutMode], case_sensitive=False),
    default=None,
    help="Layout strategy (default: chosen from the diagram type)",
)
@click.option("--direction", "-d", "direction", type=str, default=None, help="Override rank direction (TB, TD, LR)")
@click.option("--ast", "show_ast", is_flag=True, help="Print the parsed document instead of the layout")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--indent", "-i", "indent", type=int, default=2, help="JSON indentation (0 for compact)")
@click.option("--verbose", "-v", "verbose", is_flag=True, help="Log pipeline decisions to stderr")
def main(
    input: str | None,
    mode: str | None,
    direction: str | None,
    show_ast: bool,
    output: str | None,
    indent: int,
    verbose: bool,
) -> None:
    """Diagram text to JSON layout geometry."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    if show_ast:
        result = parse_with_diagnostics(text)
        payload = document_to_dict(result.document)
        payload["diagnostics"] = [diagnostic_to_dict(d) for d in result.diagnostics]
    else:
        try:
            payload = layout_to_dict(layout_text(text, mode=mode, direction=direction))
        except DiagramError as e:
            click.echo(f"error: {e}", err=True)
            sys.exit(1)

    _write(json.dumps(payload, indent=indent or None), output)


if __name__ == "__main__":
    main()
