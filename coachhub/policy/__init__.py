from coachhub.policy.authorization import authorize, can, require, visible_files_filter
from coachhub.policy.grants import ShareGrantRegistry
from coachhub.policy.levels import Action, PermissionLevel, parse_level
from coachhub.policy.models import Comment, Resource, ShareGrant
from coachhub.policy.relationships import Relationship, RelationshipResolver, classify
from coachhub.policy.visibility import PrivacyPolicy, project

__all__ = [
    "Action",
    "Comment",
    "PermissionLevel",
    "PrivacyPolicy",
    "Relationship",
    "RelationshipResolver",
    "Resource",
    "ShareGrant",
    "ShareGrantRegistry",
    "authorize",
    "can",
    "classify",
    "parse_level",
    "project",
    "require",
    "visible_files_filter",
]
