# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Provides general Environment Variables for FastAPI dependcy injection
"""

import os
import socket
from typing import Annotated

from fastapi import Depends

from common.parsing import interpret_as_bool


def _default_worker_id() -> str:
    return os.getenv("WORKER_ID") or os.getenv("HOSTNAME") or socket.gethostname()


class Config:
    def __init__(self):
        self.enable_debug_mode: bool = interpret_as_bool(os.environ.get("ENABLE_DEBUG_MODE", "False"))
        '''General debug mode configuration enabler.'''

        self.external_url = os.getenv("EXTERNAL_URL")
        self.worker_id: str = _default_worker_id()
        '''
        Identity of this process instance. Reported in responses and logs only,
        never used for correctness. Set WORKER_ID to override the host name.
        '''
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "3000"))

        self.enable_ssl_verification: bool = interpret_as_bool(os.environ.get("ENABLE_SSL_VERIFICATION", not self.enable_debug_mode))
        '''
        Enable ssl verification for outgoing requests.
        Default is True, but False in DEBUG_MODE.
        '''
        self.app_name = os.getenv("APP_NAME", "anonymous")
        '''
        Human readable application name used for loggin
        '''
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.enable_documentation_endpoints: bool = interpret_as_bool(os.environ.get("ENABLE_DOCUMENTATION_ENDPOINTS", self.enable_debug_mode))
        '''
        Enable /doc and /redoc endpoint.
        Default is False, but True in DEBUG_MODE.
        '''
        self.enable_cors: bool = interpret_as_bool(os.environ.get("ENABLE_CORS", "True"))
        '''
        Enable CORs for incomming requests, the browser frontends call both services directly.
        '''
        self.additional_allowed_origins = os.environ.get('ADDITIONAL_ALLOWED_ORIGINS', '')
        '''
        If CORs is enabled additional allowed origins can be defined as comma separated list of url (e.g. URL,URL,URL)
        '''
        self.enable_splunk_log: bool = interpret_as_bool(os.environ.get("ENABLE_SPLUNK_LOG", not self.enable_debug_mode))
        '''
        Enable Splunk compatible log format.
        Default is True, but False in DEBUG_MODE.
        '''


inject = Annotated[Config, Depends(Config)]


class DBConfig:
    component: str = "credentials"
    """Name of the owning service, used for the default sqlite file name."""

    alembic_directory: str | None = None
    """Directory holding alembic.ini and the alembic scripts of the component."""

    def __init__(self):
        db_dir = os.getenv("DB_DIR", "data")
        self.SQLALCHEMY_DATABASE_URL = os.getenv("DB_CONNECTION", f"sqlite:///{os.path.join(db_dir, f'{self.component}.db')}")
        self.SQLALCHEMY_DATABASE_SCHEMA = os.getenv("DB_SCHEMA")
        """Only used for postgresql connections"""
        if self.alembic_directory:
            self.ALEMBIC_CONFIG_FILE = os.path.join(self.alembic_directory, "alembic.ini")
        else:
            self.ALEMBIC_CONFIG_FILE = f"{self.component}/alembic.ini"
