import sys

from transcript_librarian.cli import main

sys.exit(main())
