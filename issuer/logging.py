# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class IssuerOperationsLogEntry(operations.OperationsLogEntry):
    """Container for issuer operations specific logging."""

    class Operation(Enum):
        issuance = "ISSUANCE"

    class Step(Enum):
        issuance_lookup = "LOOKUP"
        issuance_insertion = "INSERTION"
        issuance_duplicate = "DUPLICATE"

    operation: Operation
    step: Step

    credential_id: str | None = None
