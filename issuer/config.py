# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

import common.config as conf
import common.db.database as db


class IssuerConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Issuance Service")
        self.signing_secret = os.getenv("SIGNING_SECRET")
        """Secret for the HS256 token attached to issued credentials. No token is attached if unset."""


inject = Annotated[IssuerConfig, Depends(IssuerConfig)]


class IssuerDBConfig(conf.DBConfig):
    component = "issuer"
    alembic_directory = os.path.dirname(os.path.abspath(__file__))


env_session = db.session_dependency(IssuerDBConfig)

inject_session = Annotated[Session, Depends(env_session)]
