# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Broker connection details handed to the async minion.

Addresses are given as seen from *inside* the shared network, e.g.
``kafka:19092`` rather than a port mapped on the host.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GenericConnection:
    """Connection to a broker reached with a server address and credentials.

    Used for MQTT and AMQP brokers.

    Attributes:
        server: ``host:port`` of the broker.
        username: User to authenticate with.
        password: Password to authenticate with.
    """

    server: str
    username: str = ''
    password: str = ''


@dataclass(frozen=True)
class KafkaConnection:
    """Connection to a Kafka cluster."""

    bootstrap_servers: str


@dataclass(frozen=True)
class AmazonServiceConnection:
    """Connection to an Amazon messaging service (SQS or SNS).

    Attributes:
        region: AWS region, e.g. ``us-east-1``.
        access_key: AWS access key id.
        secret_key: AWS secret access key.
        endpoint_override: Alternative endpoint, e.g. a LocalStack URL.
    """

    region: str
    access_key: str
    secret_key: str
    endpoint_override: str | None = None
