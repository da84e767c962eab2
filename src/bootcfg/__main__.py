"""Allow ``python -m bootcfg``."""

from bootcfg.cli import cli

if __name__ == "__main__":
    cli(prog_name="bootcfg")
