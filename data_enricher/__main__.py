import sys

from data_enricher.cli import main

sys.exit(main())
