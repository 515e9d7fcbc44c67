"""AST encoder: layout derivation and container writing.

WHY: The CLI and tests need one import to go from an AudioSource and
EncodeOptions to AST bytes.

HOW: layout.py derives and validates the AstLayout; ast_writer.py emits
the header and blocks to a stream, to bytes, or to a file.

RULES:
- Depends only on the records in ast_create.core.ir
- Nothing is written until build_layout() has succeeded
"""

from ast_create.encoder.ast_writer import encode_ast, write_ast, write_ast_file
from ast_create.encoder.layout import block_geometry, build_layout

__all__ = ["block_geometry", "build_layout", "encode_ast", "write_ast", "write_ast_file"]
