"""Package entry point for ``python -m audio_converter``.

WHY: Users run the converter as ``python -m audio_converter song.flac``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function and exits with its status.
"""

import sys

if __name__ == "__main__":
    from audio_converter.cli import main
    sys.exit(main())
