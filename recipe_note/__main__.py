import sys

from recipe_note.cli import main

sys.exit(main())
