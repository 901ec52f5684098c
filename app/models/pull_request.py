"""Pull request and webhook event data models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class WebhookEvent(BaseModel):
    """A single GitHub webhook delivery, alive for one request."""

    event_type: str  # X-GitHub-Event, e.g. 'pull_request'
    action: Optional[str] = None
    payload: Dict[str, Any]
    signature: Optional[str] = None
    delivery_id: Optional[str] = None


class PullRequestRef(BaseModel):
    """Pull request identity and metadata taken from a webhook payload."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    title: str
    description: str = ""
    draft: bool = False
    head_sha: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_webhook_payload(cls, payload: Dict[str, Any]) -> "PullRequestRef":
        """
        Build a reference from a ``pull_request`` webhook payload.

        Raises:
            KeyError, TypeError: If a required section is missing
            pydantic.ValidationError: If a field has the wrong shape
        """
        pull_request = payload["pull_request"]
        repository = payload["repository"]

        return cls(
            owner=repository["owner"]["login"],
            repo=repository["name"],
            number=pull_request["number"],
            title=pull_request.get("title") or "",
            description=pull_request.get("body") or "",
            draft=bool(pull_request.get("draft", False)),
            head_sha=pull_request["head"]["sha"],
        )
