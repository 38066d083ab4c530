"""Package entry point for ``python -m tzlookup``.

WHY: Users run the generator as ``python -m tzlookup`` to rebuild the
lookup table in the current directory.

HOW: Delegates to the CLI's main() function.
"""

from tzlookup.cli import main

if __name__ == "__main__":
    main()
