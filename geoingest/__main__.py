import sys

from geoingest.cli import main

sys.exit(main())
