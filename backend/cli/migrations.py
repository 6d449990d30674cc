"""CLI for database migrations."""
import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _alembic_config():
    from alembic.config import Config

    return Config(str(ROOT / "alembic.ini"))


def cmd_migrate(args):
    """Upgrade the database to a revision (head by default)."""
    from alembic import command

    command.upgrade(_alembic_config(), args.revision)
    return 0


def cmd_downgrade(args):
    from alembic import command

    command.downgrade(_alembic_config(), args.revision)
    return 0


def cmd_stamp(args):
    """Stamp alembic revision without running migrations."""
    from alembic import command

    command.stamp(_alembic_config(), args.revision)
    return 0


def cmd_current(args):
    from alembic import command

    command.current(_alembic_config(), verbose=True)
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="migrations")
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("migrate", help="Run migrations (upgrade head)")
    s.add_argument("--revision", "-r", help="Target revision", default="head")
    s.set_defaults(func=cmd_migrate)
    s = sub.add_parser("downgrade", help="Revert to a revision")
    s.add_argument("--revision", "-r", help="Target revision", default="-1")
    s.set_defaults(func=cmd_downgrade)
    s = sub.add_parser("stamp", help="Stamp alembic to a revision")
    s.add_argument("--revision", "-r", help="Revision to stamp", default="head")
    s.set_defaults(func=cmd_stamp)
    s = sub.add_parser("current", help="Show the current revision")
    s.set_defaults(func=cmd_current)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
