import sys

from termcli.terminal import main

sys.exit(main())
