import sys

from schoolraise.migrations.cli import main

sys.exit(main())
