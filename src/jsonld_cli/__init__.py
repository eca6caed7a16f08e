"""JSON-LD command line interface.

The package is split the same way as the CLI itself:

- `cli`: Typer commands, output and error rendering.
- `core`: settings, errors, domain models and the processing service.
- `adapters`: document loading (stdin/file/HTTP) and input type parsing.
"""

__version__ = "0.1.0"
