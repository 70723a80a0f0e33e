#!/usr/bin/env python3
"""
Command line tools for the Arlo enrolment plugin.

    python -m enrol_arlo.cli install-defaults
    python -m enrol_arlo.cli contexts 42
    python -m enrol_arlo.cli export 42 > user-42.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from sqlalchemy.orm import Session

from enrol_arlo.config import ArloPluginConfig
from enrol_arlo.errors import EnrolArloError
from enrol_arlo.privacy import (
    ApprovedContextList,
    ArloPrivacyProvider,
    MemoryExportWriter,
    load_contexts,
)
from enrol_arlo.settings import get_settings

logger = logging.getLogger(__name__)


def install_defaults(db: Session, out: TextIO) -> int:
    installed = ArloPluginConfig(db).install_defaults()
    for name in installed:
        print(name, file=out)
    return 0


def list_contexts(db: Session, userid: int, out: TextIO) -> int:
    provider = ArloPrivacyProvider(db)
    for contextid in provider.get_contexts_for_userid(userid).get_contextids():
        print(contextid, file=out)
    return 0


def export_user(db: Session, userid: int, out: TextIO) -> int:
    writer = MemoryExportWriter()
    provider = ArloPrivacyProvider(db, writer=writer)
    contextids = provider.get_contexts_for_userid(userid).get_contextids()
    contextlist = ApprovedContextList(
        userid=userid,
        contexts=load_contexts(db, contextids),
        component=provider.component,
    )
    provider.export_user_data(contextlist)
    print(writer.to_json(), file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="enrol_arlo", description="Arlo enrolment plugin tools")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("install-defaults", help="Install plugin configuration defaults")
    contexts = sub.add_parser("contexts", help="List contexts holding data for a user")
    contexts.add_argument("userid", type=int)
    export = sub.add_parser("export", help="Export a user's data as JSON")
    export.add_argument("userid", type=int)
    return parser


def main(argv: Optional[List[str]] = None, db: Optional[Session] = None, out: TextIO = sys.stdout) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    owns_session = db is None
    if owns_session:
        from enrol_arlo.database import SessionLocal, auto_migrate_on_startup
        auto_migrate_on_startup()
        db = SessionLocal()

    try:
        if args.command == "install-defaults":
            return install_defaults(db, out)
        if args.command == "contexts":
            return list_contexts(db, args.userid, out)
        return export_user(db, args.userid, out)
    except EnrolArloError as e:
        logger.error(str(e))
        return 1
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    sys.exit(main())
