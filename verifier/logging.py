# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class VerifierOperationsLogEntry(operations.OperationsLogEntry):
    """Container for verifier operations specific logging."""

    class Operation(Enum):
        verification = "VERIFICATION"

    class Step(Enum):
        verification_fetch = "FETCH"
        verification_evaluation = "EVALUATION"
        verification_audit = "AUDIT"

    operation: Operation
    step: Step

    outcome: str | None = None
