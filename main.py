import sys

from microdata_rdf.cli import main

if __name__ == "__main__":
    sys.exit(main())
