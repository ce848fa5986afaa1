import sys

from logicflow.cli import main

sys.exit(main())
