"""Typed command outcomes for the address aggregates.

Aggregate commands never raise for business conditions. They return a
``DomainResult`` whose ``error`` carries a ``DomainErrorCode`` the import engines
can branch on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class DomainErrorCode(StrEnum):
    NO_CHANGES = "no_changes"
    CANNOT_UPDATE_DELETED = "cannot_update_deleted"
    CANNOT_DELETE_ALREADY_DELETED = "cannot_delete_already_deleted"
    INVALID_EXTERNAL_ID = "invalid_external_id"
    INVALID_NAME = "invalid_name"
    INVALID_POST_CODE_NUMBER = "invalid_post_code_number"
    INVALID_HOUSE_NUMBER = "invalid_house_number"
    POST_CODE_NOT_FOUND = "post_code_not_found"
    ROAD_NOT_FOUND = "road_not_found"
    ACCESS_ADDRESS_NOT_FOUND = "access_address_not_found"


BENIGN_ERROR_CODES: Final[frozenset[DomainErrorCode]] = frozenset(
    {
        DomainErrorCode.NO_CHANGES,
        DomainErrorCode.CANNOT_UPDATE_DELETED,
        DomainErrorCode.CANNOT_DELETE_ALREADY_DELETED,
    }
)


@dataclass(frozen=True, slots=True)
class DomainError:
    code: DomainErrorCode
    message: str

    @property
    def is_benign(self) -> bool:
        return self.code in BENIGN_ERROR_CODES

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass(frozen=True, slots=True)
class DomainResult[T]:
    value: T | None = None
    error: DomainError | None = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        if self.error is not None:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        if self.value is None:
            raise ValueError("Successful result carries no value")
        return self.value


def ok[T](value: T) -> DomainResult[T]:
    return DomainResult(value=value)


def done() -> DomainResult[None]:
    return DomainResult()


def fail[T](code: DomainErrorCode, message: str) -> DomainResult[T]:
    return DomainResult(error=DomainError(code, message))
