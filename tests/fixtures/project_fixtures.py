"""Seed data for project and organization tests."""

from application.repositories.project_repository import InMemoryProjectRepository

OWNER = "user-owner"
EDITOR = "user-editor"
ORG_MEMBER = "user-org-member"
STRANGER = "user-stranger"

INSTALLATION_ID = 7

SEED = {
    "orgs": [
        {
            "id": "org-acme",
            "name": "Acme",
            "owner": OWNER,
            "installation_id": INSTALLATION_ID,
            "members": [ORG_MEMBER],
        },
        {"id": "org-new", "name": "New Co", "owner": OWNER},
    ],
    "projects": [
        {
            "id": "proj-site",
            "name": "Website",
            "org_id": "org-acme",
            "github_repo_link": "https://github.com/acme/site",
        },
        {"id": "proj-unlinked", "name": "Draft", "org_id": "org-acme"},
        {
            "id": "proj-uninstalled",
            "name": "Elsewhere",
            "org_id": "org-new",
            "github_repo_link": "newco/docs",
        },
    ],
    "members": [
        {"project_id": "proj-site", "user_id": EDITOR},
        {"project_id": "proj-uninstalled", "user_id": EDITOR},
    ],
}


def build_project_repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository.from_document(SEED)
