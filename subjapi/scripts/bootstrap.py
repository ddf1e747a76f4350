"""
CLI entrypoint for environment bootstrap: seed the Admin/User roles and sample accounts.

  python -m subjapi.scripts.bootstrap            # roles and sample accounts
  python -m subjapi.scripts.bootstrap --roles-only

Idempotent; intended for development and test environments only.
"""

import argparse
import logging
import sys

from subjapi.core.config import get_settings
from subjapi.core.database import SessionLocal
from subjapi.core.errors import StorageError
from subjapi.services.accounts import AccountStore
from subjapi.services.bootstrap import init_roles, init_users

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run InitRoles, then InitUsers unless --roles-only."""
    parser = argparse.ArgumentParser(description="Seed roles and sample accounts.")
    parser.add_argument("--roles-only", action="store_true", help="Only seed roles")
    args = parser.parse_args(argv)

    settings = get_settings()
    if settings.APP_ENV == "prod":
        logger.error("Refusing to bootstrap with APP_ENV=prod")
        return 1
    db = SessionLocal()
    try:
        store = AccountStore(db)
        roles = init_roles(store)
        logger.info("Bootstrap roles completed: created=%s", roles)
        if not args.roles_only:
            users = init_users(store, settings)
            logger.info("Bootstrap users completed: created=%s", users)
        return 0
    except StorageError as e:
        logger.exception("Bootstrap failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
