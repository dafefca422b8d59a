"""Request history kept as two refs in the repository.

``refs/git-req/current`` and ``refs/git-req/previous`` each point to a blob
holding the request ID as an 8-byte little-endian signed integer. Recording a
new ID moves the object behind ``current`` to ``previous``, so only the last
two checked-out requests are remembered.
"""

import logging
import struct
from pathlib import Path

from gitreq.errors import ConfigError, ConfigNotFoundError
from gitreq.services.git._run import GitRunnerError, _run_git, _run_git_bytes

LOG = logging.getLogger("gitreq.services.git.history")

CURRENT_REF = "refs/git-req/current"
PREVIOUS_REF = "refs/git-req/previous"

_ID_FORMAT = "<q"


def encode_request_id(request_id: int) -> bytes:
    return struct.pack(_ID_FORMAT, request_id)


def decode_request_id(data: bytes) -> int:
    if len(data) != struct.calcsize(_ID_FORMAT):
        raise ValueError(f"Expected 8 bytes of history data, got {len(data)}")
    return struct.unpack(_ID_FORMAT, data)[0]


class RequestHistory:
    """Current and previous request IDs for one repository."""

    def __init__(self, repo_dir: Path | None = None) -> None:
        self._cwd = Path(repo_dir) if repo_dir is not None else Path.cwd()

    def _resolve(self, ref: str) -> str | None:
        try:
            return _run_git(["rev-parse", "--verify", "--quiet", ref], cwd=self._cwd, log=LOG) or None
        except GitRunnerError:
            return None

    def _read(self, ref: str) -> int:
        oid = self._resolve(ref)
        if oid is None:
            raise ConfigNotFoundError(f"No request recorded in {ref}")
        try:
            data = _run_git_bytes(["cat-file", "blob", oid], cwd=self._cwd, log=LOG)
        except GitRunnerError as e:
            raise ConfigNotFoundError(f"Unreadable request history in {ref}: {e}") from e
        try:
            return decode_request_id(data)
        except ValueError as e:
            raise ConfigNotFoundError(f"Unreadable request history in {ref}: {e}") from e

    def read_current(self) -> int:
        """Return the ID of the request checked out last.

        Raises:
            ConfigNotFoundError: If nothing has been recorded yet.
        """
        return self._read(CURRENT_REF)

    def read_previous(self) -> int:
        """Return the ID of the request checked out before the current one.

        Raises:
            ConfigNotFoundError: If fewer than two requests have been recorded.
        """
        request_id = self._read(PREVIOUS_REF)
        LOG.debug("Loaded previous request ID: %s", request_id)
        return request_id

    def record(self, request_id: int) -> int:
        """Push request_id as current, moving the old current to previous.

        ``current`` is updated first, guarded by its old value, so a failure
        leaves both refs as they were.

        Raises:
            ConfigError: If git cannot write the blob or the refs.
        """
        LOG.debug("Storing history refs for request %s", request_id)
        old_oid = self._resolve(CURRENT_REF)
        try:
            new_oid = _run_git(
                ["hash-object", "-w", "--stdin"],
                cwd=self._cwd,
                log=LOG,
                input=encode_request_id(request_id),
            )
            _run_git(["update-ref", CURRENT_REF, new_oid, old_oid or ""], cwd=self._cwd, log=LOG)
            if old_oid is not None:
                _run_git(["update-ref", PREVIOUS_REF, old_oid], cwd=self._cwd, log=LOG)
                LOG.debug("Wrote old object %s to %s", old_oid, PREVIOUS_REF)
        except GitRunnerError as e:
            raise ConfigError(f"Could not record request {request_id}: {e}") from e
        return request_id
