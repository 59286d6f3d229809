"""Backup, wipe and sorted restore pipeline.

This module provides the capacity planner, staging area, archiver,
manifest verifier, wiper, restore strategies, cleanup and the
orchestrating SortPipeline.
"""

from fatorder.pipeline.archiver import Archiver
from fatorder.pipeline.cleanup import Cleanup
from fatorder.pipeline.planner import CapacityPlan, CapacityPlanner
from fatorder.pipeline.restorer import (
    RESTORERS,
    FullDepthRestorer,
    Restorer,
    TopLevelRestorer,
    select_restorer,
)
from fatorder.pipeline.runner import SortPipeline
from fatorder.pipeline.staging import StagingArea, copy_file, copy_tree
from fatorder.pipeline.verifier import ManifestVerifier
from fatorder.pipeline.wiper import Wiper

__all__ = [
    "RESTORERS",
    "Archiver",
    "CapacityPlan",
    "CapacityPlanner",
    "Cleanup",
    "FullDepthRestorer",
    "ManifestVerifier",
    "Restorer",
    "SortPipeline",
    "StagingArea",
    "TopLevelRestorer",
    "Wiper",
    "copy_file",
    "copy_tree",
    "select_restorer",
]
