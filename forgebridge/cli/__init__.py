"""Provider CLI wrappers."""

from forgebridge.cli.base import CliRunner
from forgebridge.cli.gh import (
    GhCli,
    parse_comments_json,
    parse_pr_create_output,
    parse_pr_json,
    parse_pr_list_json,
    parse_review_comments_json,
)
from forgebridge.cli.glab import (
    GlabCli,
    extract_mr_info,
    parse_mr_create_output,
    parse_mr_json,
    parse_mr_list_json,
)

__all__ = [
    "CliRunner",
    # GitHub
    "GhCli",
    "parse_pr_json",
    "parse_pr_list_json",
    "parse_pr_create_output",
    "parse_comments_json",
    "parse_review_comments_json",
    # GitLab
    "GlabCli",
    "extract_mr_info",
    "parse_mr_create_output",
    "parse_mr_json",
    "parse_mr_list_json",
]
