import sys

from tilecollapse.main import main

sys.exit(main())
