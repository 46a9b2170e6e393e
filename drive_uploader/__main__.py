import sys

from drive_uploader.cli import main

sys.exit(main())
