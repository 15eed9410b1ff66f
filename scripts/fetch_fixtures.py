#!/usr/bin/env python
import sys

from fixture_sync.pipeline import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(1)
