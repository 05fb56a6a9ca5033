# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collaborators injected into the workflows."""

from __future__ import annotations

from dataclasses import dataclass

from ..logging import StatusLogger
from ..process_utils import CommandRunner
from ..provisioning import ArtifactProvisioner
from ..tools import ToolCatalog


@dataclass(slots=True)
class WorkflowServices:
    """Collaborators shared by the workflows."""

    provisioner: ArtifactProvisioner
    catalog: ToolCatalog
    runner: CommandRunner
    logger: StatusLogger


__all__ = ["WorkflowServices"]
