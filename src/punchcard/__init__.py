# SPDX-License-Identifier: MIT

from punchcard.cleanup import register_cleanup
from punchcard.terminal.app import run


def main() -> None:
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
