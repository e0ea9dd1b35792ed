# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
from typing import Annotated, Callable
from collections.abc import Generator

from functools import cache
import logging

from sqlalchemy import create_engine, inspect, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, DeclarativeBase, Session
from sqlalchemy.schema import CreateSchema
import sqlalchemy.exc

from alembic import command as alembic_command
from alembic.config import Config as AlembicConfig

from fastapi import Depends, status, HTTPException

from common.config import DBConfig

#################
# DB Definition #
#################

_logger = logging.getLogger(__name__)


Base: DeclarativeBase = declarative_base()


def alembic_upgrade(db_config: DBConfig):
    alembic_config_file = db_config.ALEMBIC_CONFIG_FILE
    if not os.path.exists(alembic_config_file):
        _logger.error(f"{alembic_config_file=} does not exist!")
    _prepare_sqlite_directory(db_config.SQLALCHEMY_DATABASE_URL)
    alembic_config = AlembicConfig(alembic_config_file)
    alembic_config.set_main_option(
        'script_location',
        os.path.join(os.path.dirname(alembic_config_file), "alembic"),
    )
    alembic_config.set_main_option('sqlalchemy.url', db_config.SQLALCHEMY_DATABASE_URL)
    alembic_command.upgrade(alembic_config, 'head')
    _logger.info("Alembic Upgrade Done")


def _prepare_sqlite_directory(db_connection_string: str) -> None:
    """Sqlite does not create missing directories of the database file"""
    url = make_url(db_connection_string)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = os.path.dirname(url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)


def _create_engine(db_connection_string: str):
    url = make_url(db_connection_string)
    if url.get_backend_name() == "sqlite":
        _prepare_sqlite_directory(db_connection_string)
        # Sessions are handed between the fastapi threadpool workers
        return create_engine(url, connect_args={"check_same_thread": False, "timeout": 30})
    return create_engine(url)


@cache
def _setup_db(db_connection_string: str, db_schema: str | None):
    """Sets up a DB connection with the schema"""
    engine = _create_engine(db_connection_string)

    if db_schema and engine.dialect.name == "postgresql":

        @event.listens_for(engine, "connect", insert=True)
        def set_search_path(dbapi_connection, connection_record):
            """
            Setting Session search path every time a new connection is made
            https://docs.sqlalchemy.org/en/20/dialects/postgresql.html#setting-alternate-search-paths-on-connect
            """
            existing_autocommit = dbapi_connection.autocommit
            dbapi_connection.autocommit = True
            cursor = dbapi_connection.cursor()
            cursor.execute("SET SESSION search_path TO '%s'" % db_schema)
            cursor.close()
            dbapi_connection.autocommit = existing_autocommit

        inspector = inspect(engine)
        if db_schema not in inspector.get_schema_names():
            with engine.connect() as conn:
                conn.execute(CreateSchema(db_schema, if_not_exists=True))
                conn.commit()

    _session_local = sessionmaker(bind=engine)
    return engine, _session_local


def session(db_connection_string: str, db_schema: str | None = None) -> Session:
    try:
        engine, _session_local = _setup_db(db_connection_string, db_schema)
        db_session = _session_local()
        return db_session
    except sqlalchemy.exc.OperationalError:
        _logger.exception("Could not establish connection to database.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not establish connection to database",
        )


def session_dependency(db_config_class: type[DBConfig]) -> Callable[..., Generator[Session, None, None]]:
    """
    Creates the request scoped session dependency for the database of one component.
    The config class is injected itself, so tests can override either of them.
    """

    def env_session(db_config: Annotated[DBConfig, Depends(db_config_class)]) -> Generator[Session, None, None]:
        db_session = session(
            db_connection_string=db_config.SQLALCHEMY_DATABASE_URL,
            db_schema=db_config.SQLALCHEMY_DATABASE_SCHEMA,
        )
        try:
            yield db_session
        finally:
            db_session.close()

    return env_session
