#!/usr/bin/env python3
"""
Basic forgebridge usage example.

Runs offline: detection, configuration, error classification and a mock
provider. Pass a repository path to also detect its real provider.
Run with: python examples/basic_usage.py [REPO_PATH]
"""

import asyncio
import sys

from forgebridge import (
    CommandFailedError,
    GitLabConfig,
    MergeRequestCreationRequest,
    NotAuthenticatedError,
    ProviderError,
    detect_provider_from_url,
    open_repository,
)
from forgebridge.testing import MockGitProvider, create_mock_repository
from forgebridge.workflow import attach_existing_merge_request, create_merge_request_with_follow_up

print("=== forgebridge Basic Usage Example ===\n")

# 1. Detect providers from remote URLs
print("1. Detecting providers from remote URLs...")
for url in (
    "git@github.com:octo/hello.git",
    "https://gitlab.com/org/team/project",
    "git@gitlab.company.io:dev/app.git",
):
    provider_type, repo = detect_provider_from_url(url)
    print(f"   {url}")
    print(f"     -> {provider_type}: {repo.full_path} (host={repo.host})")

print("\n   OK: Detection working\n")

# 2. Configuration
print("2. GitLab configuration...")
config = GitLabConfig(base_url="https://gitlab.example.com/api/v4/", token="glpat-example")
print(f"   {config!r}")
print(f"   API base: {config.api_base_url}")
print(f"   glab host: {config.cli_host}")

print("\n   OK: Configuration working\n")

# 3. Error classification
print("3. Error classification...")
for error in (NotAuthenticatedError("run gh auth login"), CommandFailedError("HTTP 502")):
    print(f"   {error.kind.value}: retryable={error.retryable}")

print("\n   OK: Errors working\n")


# 4. Workflow against a mock provider
async def run_workflow() -> None:
    provider = MockGitProvider()
    repo = create_mock_repository(owner="octo", name="hello")

    class PrintingRunner:
        async def start_follow_up(self, prompt: str) -> None:
            print(f"   Follow-up prompt starts with: {prompt.splitlines()[0]!r}")

    info = await create_merge_request_with_follow_up(
        provider,
        repo,
        MergeRequestCreationRequest(title="Add feature", source_branch="feature", target_branch="main"),
        follow_up=PrintingRunner(),
    )
    print(f"   Created #{info.number}: {info.url} ({info.state.value})")

    provider.configure_list_for_branch(response=[info])
    attached = await attach_existing_merge_request(provider, repo, "feature")
    print(f"   Attached #{attached.number if attached else None}")


print("4. Running the merge request workflow against a mock provider...")
asyncio.run(run_workflow())
print("\n   OK: Workflow working\n")

# 5. Real repository (optional)
if len(sys.argv) > 1:
    print("5. Detecting the provider of a local repository...")
    try:
        provider, repo = open_repository(sys.argv[1])
        print(f"   {provider.provider_type}: {repo.full_path}")
    except ProviderError as e:
        print(f"   {e.kind.value}: {e}")

print("=== All examples completed ===")
