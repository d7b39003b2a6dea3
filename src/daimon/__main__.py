import sys
from daimon.cli import main

sys.exit(main())
