"""Allow ``python -m wiki_searcher``."""

import sys

from wiki_searcher.app import main

sys.exit(main())
