import sys

from debian_setup.cli import main

if __name__ == "__main__":
    sys.exit(main())
