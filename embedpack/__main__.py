import sys

from embedpack.cli import main

sys.exit(main())
