"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from crm_dedup.models.workspace import Workspace
from crm_dedup.models.person import Person, SocialProfile
from crm_dedup.models.company import Company, PersonCompany
from crm_dedup.models.tag import Tag, PersonTag
from crm_dedup.models.interaction import Interaction, InteractionPerson
from crm_dedup.models.note import Note
from crm_dedup.models.duplicate_candidate import CandidateStatus, DuplicateCandidate

# Export all models
__all__ = [
    "Workspace",
    "Person",
    "SocialProfile",
    "Company",
    "PersonCompany",
    "Tag",
    "PersonTag",
    "Interaction",
    "InteractionPerson",
    "Note",
    "CandidateStatus",
    "DuplicateCandidate",
]
