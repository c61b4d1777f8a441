"""
Test fixtures for GitHub-backed tests.

FakeGitHub is an in-memory model of the parts of the GitHub REST API the
repository service uses (App tokens, repositories, refs, Git objects and the
contents API), served through httpx.MockTransport. Every request yields to the
event loop once, so concurrent operations interleave the way they do against
the real API.

InMemoryGitObjectStore is a GitObjectStore for commit builder tests that do
not need HTTP at all.
"""

import asyncio
import base64
import hashlib
import itertools
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote

import httpx
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from application.services.github.api.client import GitHubAPIClient
from application.services.github.git.object_store import GitObjectStore
from application.services.github.github_service import GitHubService
from application.services.github.models.types import EntryType, RepositoryRef, TreeEntry
from common.exception.errors import ConflictError, NotFoundError, UpstreamError

BASE_URL = "https://api.github.test"

_counter = itertools.count(1)


def _sha(*parts: Any) -> str:
    digest = hashlib.sha1()
    for part in parts:
        digest.update(part if isinstance(part, bytes) else str(part).encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


def blob_sha(data: bytes) -> str:
    return _sha(b"blob", data)


def generate_private_key_pem() -> str:
    """A throwaway RSA key for signing App JWTs in tests."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@dataclass
class FakeRepository:
    owner: str
    name: str
    default_branch: str = "main"
    updated_at: str = "2024-01-01T00:00:00Z"
    refs: Dict[str, str] = field(default_factory=dict)
    blobs: Dict[str, bytes] = field(default_factory=dict)
    # Trees are flat maps of full path -> blob sha
    trees: Dict[str, Dict[str, str]] = field(default_factory=dict)
    commits: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def add_blob(self, data: bytes) -> str:
        sha = blob_sha(data)
        self.blobs[sha] = data
        return sha

    def add_tree(self, entries: Dict[str, str]) -> str:
        sha = _sha(b"tree", json.dumps(sorted(entries.items())))
        self.trees[sha] = dict(entries)
        return sha

    def add_commit(self, message: str, tree: str, parents: List[str]) -> str:
        sha = _sha(b"commit", message, tree, ",".join(parents), next(_counter))
        self.commits[sha] = {"message": message, "tree": tree, "parents": list(parents)}
        return sha

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        pending = [descendant]
        seen = set()
        while pending:
            sha = pending.pop()
            if sha == ancestor:
                return True
            if sha in seen or sha not in self.commits:
                continue
            seen.add(sha)
            pending.extend(self.commits[sha]["parents"])
        return False

    def tree_at(self, branch: str) -> Dict[str, str]:
        return self.trees[self.commits[self.refs[branch]]["tree"]]

    def tree_at_ref(self, ref: str) -> Optional[Dict[str, str]]:
        """Tree of a branch name or a commit SHA, or None if ref names neither."""
        commit = self.refs.get(ref, ref)
        if commit not in self.commits:
            return None
        return self.trees[self.commits[commit]["tree"]]

    def to_api(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "owner": {"login": self.owner},
            "html_url": f"https://github.com/{self.full_name}",
            "default_branch": self.default_branch,
            "private": True,
            "description": None,
            "updated_at": self.updated_at,
        }


@dataclass
class InjectedFailure:
    method: str
    pattern: "re.Pattern[str]"
    status: int
    times: int
    skip: int
    message: str


class FakeGitHub:
    """In-memory GitHub REST API."""

    inline_content_limit = 1024 * 1024

    def __init__(self):
        self.repos: Dict[str, FakeRepository] = {}
        self.installations: Dict[int, List[str]] = {}
        self.requests: List[Tuple[str, str]] = []
        self.tokens_issued = 0
        self.token_expires_at = "2099-01-01T00:00:00Z"
        self._failures: List[InjectedFailure] = []

    # ------------------------------------------------------------------
    # Test setup helpers
    # ------------------------------------------------------------------

    def add_repo(
        self,
        owner: str,
        name: str,
        files: Optional[Dict[str, str]] = None,
        default_branch: str = "main",
        installation_id: Optional[int] = None,
        updated_at: str = "2024-01-01T00:00:00Z",
    ) -> FakeRepository:
        repo = FakeRepository(
            owner=owner, name=name, default_branch=default_branch, updated_at=updated_at
        )
        entries = {
            path: repo.add_blob(content.encode("utf-8")) for path, content in (files or {}).items()
        }
        tree = repo.add_tree(entries)
        repo.refs[default_branch] = repo.add_commit("Initial commit", tree, [])
        self.repos[repo.full_name.lower()] = repo
        if installation_id is not None:
            self.installations.setdefault(installation_id, []).append(repo.full_name.lower())
        return repo

    def add_installation(self, installation_id: int) -> None:
        self.installations.setdefault(installation_id, [])

    def repo(self, full_name: str) -> FakeRepository:
        return self.repos[full_name.lower()]

    def files(self, full_name: str, branch: str) -> Dict[str, str]:
        """Text of every file at the tip of a branch."""
        repo = self.repo(full_name)
        return {
            path: repo.blobs[sha].decode("utf-8") for path, sha in repo.tree_at(branch).items()
        }

    def commit_count(self, full_name: str) -> int:
        return len(self.repo(full_name).commits)

    def head(self, full_name: str, branch: str) -> Optional[str]:
        return self.repo(full_name).refs.get(branch)

    def write_file(self, full_name: str, branch: str, path: str, content: str) -> str:
        """Commit a file directly, as another GitHub client would."""
        repo = self.repo(full_name)
        entries = dict(repo.tree_at(branch))
        entries[path] = repo.add_blob(content.encode("utf-8"))
        commit = repo.add_commit(f"Write {path}", repo.add_tree(entries), [repo.refs[branch]])
        repo.refs[branch] = commit
        return commit

    def fail(
        self,
        method: str,
        pattern: str,
        status: int = 500,
        times: int = 1,
        skip: int = 0,
        message: str = "Injected failure",
    ) -> None:
        """Fail matching requests with status after letting `skip` of them through."""
        self._failures.append(
            InjectedFailure(method.upper(), re.compile(pattern), status, times, skip, message)
        )

    def count(self, method: str, pattern: str) -> int:
        regex = re.compile(pattern)
        return sum(1 for m, path in self.requests if m == method.upper() and regex.search(path))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self, token: str = "ghs_test") -> GitHubAPIClient:
        return GitHubAPIClient(token=token, base_url=BASE_URL, transport=self.transport())

    def service(self, owner: str, name: str, **kwargs) -> GitHubService:
        return GitHubService(self.client(), RepositoryRef(owner=owner, name=name), **kwargs)

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def handle(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0)
        method = request.method
        path = unquote(request.url.path)
        self.requests.append((method, path))

        for failure in self._failures:
            if failure.method == method and failure.pattern.search(path) and failure.times > 0:
                if failure.skip > 0:
                    failure.skip -= 1
                    continue
                failure.times -= 1
                return self._error(failure.status, failure.message)

        body = json.loads(request.content) if request.content else {}
        params = dict(request.url.params)

        match = re.fullmatch(r"/app/installations/(\d+)/access_tokens", path)
        if match and method == "POST":
            return self._access_token(int(match.group(1)), request)

        if path == "/installation/repositories" and method == "GET":
            return self._installation_repositories(request, params)

        match = re.fullmatch(r"/repos/([^/]+)/([^/]+)(/.*)?", path)
        if not match:
            return self._error(404, "Not Found")
        repo = self.repos.get(f"{match.group(1)}/{match.group(2)}".lower())
        if repo is None:
            return self._error(404, "Not Found")
        return self._repo_request(repo, method, match.group(3) or "", body, params)

    def _json(self, status: int, data: Any) -> httpx.Response:
        return httpx.Response(status, json=data)

    def _error(self, status: int, message: str) -> httpx.Response:
        return self._json(status, {"message": message})

    def _access_token(self, installation_id: int, request: httpx.Request) -> httpx.Response:
        if not request.headers.get("Authorization", "").startswith("Bearer "):
            return self._error(401, "A JSON web token could not be decoded")
        if installation_id not in self.installations:
            return self._error(404, "Not Found")
        self.tokens_issued += 1
        return self._json(
            201,
            {
                "token": f"ghs_{installation_id}_{self.tokens_issued}",
                "expires_at": self.token_expires_at,
                "permissions": {"contents": "write"},
                "repository_selection": "selected",
            },
        )

    def _installation_repositories(self, request: httpx.Request, params: Dict[str, str]):
        token = request.headers.get("Authorization", "")
        match = re.match(r"Bearer ghs_(\d+)_", token)
        if not match:
            return self._error(401, "Bad credentials")
        names = self.installations.get(int(match.group(1)), [])
        per_page = int(params.get("per_page", 30))
        page = int(params.get("page", 1))
        chunk = names[(page - 1) * per_page: page * per_page]
        return self._json(
            200,
            {
                "total_count": len(names),
                "repositories": [self.repos[name].to_api() for name in chunk],
            },
        )

    def _repo_request(
        self,
        repo: FakeRepository,
        method: str,
        rest: str,
        body: Dict[str, Any],
        params: Dict[str, str],
    ) -> httpx.Response:
        if rest == "" and method == "GET":
            return self._json(200, repo.to_api())

        match = re.fullmatch(r"/branches/(.+)", rest)
        if match and method == "GET":
            branch = match.group(1)
            if branch not in repo.refs:
                return self._error(404, "Branch not found")
            return self._json(200, {"name": branch, "commit": {"sha": repo.refs[branch]}})

        match = re.fullmatch(r"/git/ref/heads/(.+)", rest)
        if match and method == "GET":
            branch = match.group(1)
            if branch not in repo.refs:
                return self._error(404, "Not Found")
            return self._json(
                200, {"ref": f"refs/heads/{branch}", "object": {"sha": repo.refs[branch], "type": "commit"}}
            )

        if rest == "/git/refs" and method == "POST":
            branch = body["ref"].replace("refs/heads/", "", 1)
            if branch in repo.refs:
                return self._error(422, "Reference already exists")
            if body["sha"] not in repo.commits:
                return self._error(422, "Object does not exist")
            repo.refs[branch] = body["sha"]
            return self._json(201, {"ref": body["ref"], "object": {"sha": body["sha"]}})

        match = re.fullmatch(r"/git/refs/heads/(.+)", rest)
        if match and method == "PATCH":
            branch = match.group(1)
            if branch not in repo.refs:
                return self._error(422, "Reference does not exist")
            new_sha = body["sha"]
            if new_sha not in repo.commits:
                return self._error(422, "Object does not exist")
            if not body.get("force") and not repo.is_ancestor(repo.refs[branch], new_sha):
                return self._error(422, "Update is not a fast forward")
            repo.refs[branch] = new_sha
            return self._json(200, {"ref": f"refs/heads/{branch}", "object": {"sha": new_sha}})

        match = re.fullmatch(r"/git/commits/([0-9a-f]+)", rest)
        if match and method == "GET":
            commit = repo.commits.get(match.group(1))
            if commit is None:
                return self._error(404, "Not Found")
            return self._json(
                200,
                {
                    "sha": match.group(1),
                    "message": commit["message"],
                    "tree": {"sha": commit["tree"]},
                    "parents": [{"sha": parent} for parent in commit["parents"]],
                },
            )

        if rest == "/git/blobs" and method == "POST":
            if body.get("encoding") == "base64":
                data = base64.b64decode(body["content"])
            else:
                data = body["content"].encode("utf-8")
            return self._json(201, {"sha": repo.add_blob(data)})

        match = re.fullmatch(r"/git/blobs/([0-9a-f]+)", rest)
        if match and method == "GET":
            data = repo.blobs.get(match.group(1))
            if data is None:
                return self._error(404, "Not Found")
            return self._json(
                200,
                {
                    "sha": match.group(1),
                    "size": len(data),
                    "content": base64.b64encode(data).decode("ascii"),
                    "encoding": "base64",
                },
            )

        if rest == "/git/trees" and method == "POST":
            base = body.get("base_tree")
            if base is not None and base not in repo.trees:
                return self._error(422, "Invalid tree info")
            entries = dict(repo.trees[base]) if base else {}
            for entry in body["tree"]:
                if entry["sha"] not in repo.blobs:
                    return self._error(422, "Invalid tree info")
                entries[entry["path"]] = entry["sha"]
            return self._json(201, {"sha": repo.add_tree(entries)})

        if rest == "/git/commits" and method == "POST":
            if body["tree"] not in repo.trees:
                return self._error(422, "Tree SHA does not exist")
            for parent in body["parents"]:
                if parent not in repo.commits:
                    return self._error(422, "Parent SHA does not exist")
            return self._json(201, {"sha": repo.add_commit(body["message"], body["tree"], body["parents"])})

        match = re.fullmatch(r"/contents/?(.*)", rest)
        if match and method == "GET":
            return self._get_contents(repo, match.group(1), params.get("ref", repo.default_branch))
        if match and method == "PUT":
            return self._put_contents(repo, match.group(1), body)

        return self._error(404, "Not Found")

    def _get_contents(self, repo: FakeRepository, path: str, ref: str) -> httpx.Response:
        tree = repo.tree_at_ref(ref)
        if tree is None:
            return self._error(404, f"No commit found for the ref {ref}")
        path = path.strip("/")

        if path in tree:
            data = repo.blobs[tree[path]]
            inline = len(data) <= self.inline_content_limit
            return self._json(
                200,
                {
                    "type": "file",
                    "name": path.rsplit("/", 1)[-1],
                    "path": path,
                    "sha": tree[path],
                    "size": len(data),
                    "encoding": "base64" if inline else "none",
                    "content": base64.b64encode(data).decode("ascii") if inline else "",
                },
            )

        prefix = f"{path}/" if path else ""
        children: Dict[str, Dict[str, Any]] = {}
        for file_path, sha in sorted(tree.items()):
            if not file_path.startswith(prefix):
                continue
            name, _, remainder = file_path[len(prefix):].partition("/")
            child_path = f"{prefix}{name}"
            if remainder:
                children.setdefault(
                    name,
                    {"type": "dir", "name": name, "path": child_path, "sha": _sha(b"dir", child_path), "size": 0},
                )
            else:
                children[name] = {
                    "type": "file",
                    "name": name,
                    "path": child_path,
                    "sha": sha,
                    "size": len(repo.blobs[sha]),
                }

        if not children and path:
            return self._error(404, "Not Found")
        return self._json(200, list(children.values()))

    def _put_contents(self, repo: FakeRepository, path: str, body: Dict[str, Any]) -> httpx.Response:
        branch = body.get("branch", repo.default_branch)
        if branch not in repo.refs:
            return self._error(404, f"Branch {branch} not found")

        entries = dict(repo.tree_at(branch))
        current = entries.get(path)
        supplied = body.get("sha")
        if current is not None and supplied is None:
            return self._error(422, "Invalid request. \"sha\" wasn't supplied.")
        if supplied is not None and supplied != current:
            return self._error(409, f"{path} does not match {supplied}")

        data = base64.b64decode(body["content"])
        entries[path] = repo.add_blob(data)
        commit = repo.add_commit(body["message"], repo.add_tree(entries), [repo.refs[branch]])
        repo.refs[branch] = commit
        return self._json(
            200 if current else 201,
            {"content": {"path": path, "sha": entries[path]}, "commit": {"sha": commit}},
        )


class InMemoryGitObjectStore(GitObjectStore):
    """GitObjectStore over a FakeRepository, without HTTP.

    fail_blob_at makes the n-th create_blob call (1-based) raise UpstreamError.
    before_update_ref is awaited right before the compare-and-swap, so tests
    can move the branch in between.
    """

    def __init__(self, repo: FakeRepository):
        self.repo = repo
        self.fail_blob_at: Optional[int] = None
        self.blob_calls = 0
        self.tree_calls = 0
        self.commit_calls = 0
        self.update_calls = 0
        self.before_update_ref = None

    async def get_branch_head(self, branch: str) -> str:
        await asyncio.sleep(0)
        if branch not in self.repo.refs:
            raise NotFoundError(f"Branch '{branch}' not found")
        return self.repo.refs[branch]

    async def get_commit_tree(self, commit_sha: str) -> str:
        await asyncio.sleep(0)
        return self.repo.commits[commit_sha]["tree"]

    async def get_entry_type(self, commit_sha: str, path: str) -> Optional[EntryType]:
        await asyncio.sleep(0)
        tree = self.repo.tree_at_ref(commit_sha)
        if path in tree:
            return EntryType.FILE
        if any(entry.startswith(f"{path}/") for entry in tree):
            return EntryType.DIR
        return None

    async def create_blob(self, content: str) -> str:
        self.blob_calls += 1
        call = self.blob_calls
        await asyncio.sleep(0)
        if self.fail_blob_at is not None and call == self.fail_blob_at:
            raise UpstreamError("Creating blob: injected failure")
        return self.repo.add_blob(content.encode("utf-8"))

    async def create_tree(self, base_tree: str, entries: List[TreeEntry]) -> str:
        self.tree_calls += 1
        await asyncio.sleep(0)
        tree = dict(self.repo.trees[base_tree])
        for entry in entries:
            tree[entry.path] = entry.sha
        return self.repo.add_tree(tree)

    async def create_commit(self, message: str, tree_sha: str, parents: List[str]) -> str:
        self.commit_calls += 1
        await asyncio.sleep(0)
        return self.repo.add_commit(message, tree_sha, parents)

    async def update_branch(self, branch: str, new_sha: str, expected_sha: str) -> None:
        self.update_calls += 1
        if self.before_update_ref is not None:
            await self.before_update_ref()
        await asyncio.sleep(0)
        if self.repo.refs.get(branch) != expected_sha:
            raise ConflictError(f"Branch '{branch}' moved")
        self.repo.refs[branch] = new_sha
