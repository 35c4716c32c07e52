"""
Output formatting for lookup results.

Results are serialized to a single text document (JSON or CSV) and handed to
a renderer, which decides where and how that document is shown: plain text
on a stream, colorized JSON on the terminal, or a file on disk.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Any, Iterable, Optional, TextIO, Union
from rich.console import Console
from rich.theme import Theme

SUPPORTED_FORMATS = ('json', 'csv')

JSON_THEME = Theme({
    'json.key': 'magenta',
    'json.str': 'green',
    'json.number': 'red',
    'json.bool_true': 'cyan',
    'json.bool_false': 'cyan',
    'json.null': 'grey50',
    'json.brace': 'white',
})


def parse_formats(value: Optional[str]) -> List[str]:
    """Split a comma-separated ``--format`` value into tokens, defaulting to json."""
    if not value:
        return ['json']
    return [token.strip().lower() for token in value.split(',') if token.strip()]


def to_json(results: List[Dict[str, Any]]) -> str:
    """Pretty-print results as a JSON array with 2-space indentation."""
    return json.dumps(results, indent=2, ensure_ascii=False)


def _csv_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return '"' + value.replace('"', '""') + '"'
    if isinstance(value, (dict, list)):
        # Nested values are serialized and quoted so they stay in one field
        return _csv_value(json.dumps(value, ensure_ascii=False, separators=(',', ':')))
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        # Integral floats are written without a fractional part: 1.0 becomes 1
        return str(int(value))
    # Booleans and numbers in their JSON literal form
    return json.dumps(value)


def to_csv(results: List[Dict[str, Any]]) -> str:
    """
    Render results as CSV.

    The header is the key set of the first result, in its order. Keys absent
    from a later result produce an empty field; keys only present in later
    results are dropped.
    """
    if not results:
        return ''

    headers = list(results[0].keys())
    rows = [','.join(headers)]
    for row in results:
        rows.append(','.join(_csv_value(row.get(header)) for header in headers))
    return '\n'.join(rows)


def format_output(results: List[Dict[str, Any]], formats: Iterable[str]) -> str:
    """
    Serialize results in the requested format.

    JSON takes precedence: when 'json' is requested CSV is never produced,
    whatever the order of the tokens.

    Args:
        results: Ordered lookup results
        formats: Requested format tokens

    Returns:
        The formatted document, or an empty string if no token is recognized
    """
    formats = [fmt.lower() for fmt in formats]

    if 'json' in formats:
        return to_json(results)

    if 'csv' in formats:
        return to_csv(results)

    return ''


class PlainRenderer:
    """Writes the formatted document to a text stream unchanged."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def render(self, results: List[Dict[str, Any]], text: str):
        print(text, file=self.stream or sys.stdout)


class ColorRenderer:
    """Prints each result as its own colorized JSON document."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(theme=JSON_THEME)

    def render(self, results: List[Dict[str, Any]], text: str):
        for result in results:
            self.console.print_json(data=result, indent=2)


class FileRenderer:
    """Writes the formatted document to a file, replacing its contents."""

    def __init__(self, path: Union[str, Path], console: Optional[Console] = None):
        self.path = Path(path)
        self.console = console or Console()

    def render(self, results: List[Dict[str, Any]], text: str):
        self.path.write_text(text, encoding='utf-8')
        self.console.print(f"IP information saved to {self.path}", style='green', highlight=False, markup=False, soft_wrap=True)


def select_renderer(out_file: Optional[str], formats: Iterable[str], no_color: bool = False):
    """
    Pick the renderer for a run.

    A file target always wins. On the terminal, colorized JSON is used unless
    colors are disabled or JSON is not among the requested formats.
    """
    if out_file:
        return FileRenderer(out_file, console=Console(no_color=no_color))

    if no_color or 'json' not in [fmt.lower() for fmt in formats]:
        return PlainRenderer()

    return ColorRenderer()


def write_output(results: List[Dict[str, Any]], formats: Iterable[str], renderer) -> str:
    """Format results and hand them to a renderer. Returns the formatted text."""
    formats = list(formats)
    text = format_output(results, formats)
    renderer.render(results, text)
    return text
