# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gantry/credentials.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import RoleAssumptionError


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str
    session_token: str


class CredentialProvider(Protocol):
    def assume_role(self, role_arn: str) -> Credentials: ...


class StsCredentialProvider:
    """Assumes an IAM role through STS using the ambient AWS credentials."""

    def __init__(self, session: boto3.Session | None = None):
        self._session = session

    def assume_role(self, role_arn: str) -> Credentials:
        session = self._session or boto3.Session()
        try:
            resp = session.client("sts").assume_role(
                RoleArn=role_arn,
                RoleSessionName=f"gantry-{int(time.time())}",
            )
        except (BotoCoreError, ClientError) as exc:
            raise RoleAssumptionError(role_arn, str(exc)) from exc

        creds = resp["Credentials"]
        return Credentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
        )
