import sys

from massif_tsv.commands import main

if __name__ == "__main__":
    sys.exit(main())
