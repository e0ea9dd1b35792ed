# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import dotenv
import fastapi
import uvicorn

dotenv.load_dotenv()

import common.db.database as db  # noqa: E402 environment has to be loaded first
import issuer.config as conf  # noqa: E402
import issuer.issuer as app_source  # noqa: E402


def startup() -> fastapi.FastAPI:
    db.alembic_upgrade(conf.IssuerDBConfig())
    return app_source.app


app = startup()

if __name__ == "__main__":
    config = conf.IssuerConfig()
    uvicorn.run(app, host=config.host, port=config.port)
