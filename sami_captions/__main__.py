"""Package entry point for ``python -m sami_captions``.

WHY: Users run the converter as ``python -m sami_captions input.smi``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from sami_captions.cli import main

if __name__ == "__main__":
    main()
