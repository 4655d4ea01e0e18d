import logging
from logging.config import fileConfig
from pathlib import Path

from flask import current_app
from alembic import context

config = context.config

if config.config_file_name and Path(config.config_file_name).exists():
    fileConfig(config.config_file_name, disable_existing_loggers=False)
else:
    logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("alembic.env")

# feedbacks table lives here; importing registers it on db.metadata
import feedback_desk.models  # noqa: E402,F401

feedback_db = current_app.extensions["migrate"].db


def _engine():
    return feedback_db.engine


def _url() -> str:
    return _engine().url.render_as_string(hide_password=False).replace("%", "%%")


config.set_main_option("sqlalchemy.url", _url())


def _include_object(obj, name, type_, reflected, compare_to):
    # Never autogenerate DROP for objects that exist only in the live database
    if reflected and compare_to is None:
        logger.info("Skipping unmanaged %s %s", type_, name)
        return False
    return True


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=feedback_db.metadata,
        literal_binds=True,
        compare_type=True,
        include_object=_include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    def skip_empty_revision(ctx, revision, directives):
        if getattr(config.cmd_opts, "autogenerate", False) and directives[0].upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected for feedbacks.")

    conf_args = dict(current_app.extensions["migrate"].configure_args)
    conf_args.setdefault("process_revision_directives", skip_empty_revision)
    conf_args.update(
        target_metadata=feedback_db.metadata,
        compare_type=True,
        include_object=_include_object,
    )

    with _engine().connect() as connection:
        context.configure(connection=connection, **conf_args)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
