"""Allow ``python -m robot_cli``."""

from robot_cli.cli import main

if __name__ == "__main__":
    main()
