import sys

from doc_expert.cli import main

sys.exit(main())
