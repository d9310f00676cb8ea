import sys

from yapnet_client.cli import main

sys.exit(main())
