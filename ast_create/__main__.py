"""Package entry point for ``python -m ast_create``.

WHY: Users run the converter as ``python -m ast_create input.wav`` when the
``ast-create`` console script is not on PATH.

HOW: Delegates to the CLI's main() function.
"""

from ast_create.cli import main

if __name__ == "__main__":
    main()
