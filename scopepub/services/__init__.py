"""Application services for the scopepub CLI.

Services implement the publish workflow, coordinating between the domain
layer (core/) and infrastructure (registry/, git/, platform/).
"""

from scopepub.services.publish import (
    Failed,
    PackagePlan,
    Published,
    PublishOutcome,
    PublishReport,
    PublishService,
    Skipped,
)
from scopepub.services.publish_errors import PublishError

__all__ = [
    "Failed",
    "PackagePlan",
    "Published",
    "PublishError",
    "PublishOutcome",
    "PublishReport",
    "PublishService",
    "Skipped",
]
