import sys
import logging

from cli import main as cli_main

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
